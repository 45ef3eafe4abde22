import pytest

from sortmovies.rotate import TrinityRotateMovie

from conftest import make_input


def ramp(n):
    return bytes(i % 256 for i in range(n))


def test_rotates_1024_by_256():
    data = make_input("random", 1024)
    movie = TrinityRotateMovie("r", data, 256)
    movie.run()
    assert bytes(movie.result) == bytes(data[256:] + data[:256])


@pytest.mark.parametrize("n", range(0, 21))
def test_every_small_rotation(n):
    data = ramp(n)
    for k in range(0, n + 3):
        movie = TrinityRotateMovie("r", data, k)
        movie.run()
        shift = k % n if n else 0
        assert bytes(movie.result) == data[shift:] + data[:shift], (n, k)


@pytest.mark.parametrize("places", [0, 10, 20])
def test_no_op_rotation_is_done_at_construction(places):
    movie = TrinityRotateMovie("r", ramp(10), places)
    assert movie.done
    assert movie.advance(0) is False
    assert movie.counters.copies == 0


def test_one_cycle_per_step():
    movie = TrinityRotateMovie("r", ramp(300), 77)
    while movie.advance(movie.steps):
        pass
    assert movie.counters.swaps == movie.steps


def test_rotation_moves_are_linear():
    n = 1000
    movie = TrinityRotateMovie("r", ramp(n), 333)
    movie.run()
    assert movie.counters.copies <= 3 * n
    assert movie.steps <= n
