import numpy as np


def random_bytes(size, seed=None) -> bytearray:
    rng = np.random.default_rng(seed)
    return bytearray(rng.integers(0, 256, size, dtype=np.uint8).tobytes())


def scatter_reverse(size, seed=None) -> bytearray:
    """Descending ramp with 1/8 random scatter mixed in."""
    rng  = np.random.default_rng(seed)
    noise = rng.integers(0, 256, size, dtype=np.uint8).astype(np.float64)
    f    = 256.0 / max(size, 1)
    rev  = (size - np.arange(size, dtype=np.float64)) * f
    vals = ((rev * 7) + noise) / 8
    return bytearray(np.clip(vals, 0, 255).astype(np.uint8).tobytes())


def sorted_bytes(size, seed=None) -> bytearray:
    f = 256.0 / max(size, 1)
    vals = np.arange(size, dtype=np.float64) * f
    return bytearray(np.clip(vals, 0, 255).astype(np.uint8).tobytes())


def reversed_bytes(size, seed=None) -> bytearray:
    return bytearray(reversed(sorted_bytes(size)))


DATASETS = {
    "random":          random_bytes,
    "scatter_reverse": scatter_reverse,
    "sorted":          sorted_bytes,
    "reversed":        reversed_bytes,
}
