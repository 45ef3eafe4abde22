import os

# headless pygame: no window, no sound card
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from sortmovies.datasets import random_bytes, reversed_bytes, sorted_bytes

INPUTS = {
    "random":   lambda n: random_bytes(n, seed=n + 7),
    "sorted":   sorted_bytes,
    "reversed": reversed_bytes,
}


@pytest.fixture(params=sorted(INPUTS))
def input_kind(request):
    return request.param


def make_input(kind, n):
    return INPUTS[kind](n)
