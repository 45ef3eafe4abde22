import pytest

from sortmovies.datasets import DATASETS, random_bytes, reversed_bytes, scatter_reverse, sorted_bytes


@pytest.mark.parametrize("name", sorted(DATASETS))
@pytest.mark.parametrize("n", [0, 1, 300])
def test_lengths(name, n):
    data = DATASETS[name](n, seed=1)
    assert isinstance(data, bytearray)
    assert len(data) == n


def test_seeded_random_is_repeatable():
    assert random_bytes(64, seed=3) == random_bytes(64, seed=3)
    assert random_bytes(64, seed=3) != random_bytes(64, seed=4)


def test_sorted_and_reversed():
    up = sorted_bytes(512)
    assert list(up) == sorted(up)
    assert up[0] == 0 and up[-1] == 255
    assert reversed_bytes(512) == bytearray(reversed(up))


def test_scatter_reverse_trends_down():
    data = scatter_reverse(1000, seed=2)
    first, last = data[:100], data[-100:]
    assert sum(first) / 100 > sum(last) / 100 + 100
