import pygame
import pytest

from sortmovies.registry import get_movie
from sortmovies.surface import PygameSurface, RecordingSurface, value_to_color


def test_frame_bytes_are_rgb24():
    s = PygameSurface(32, 16)
    s.clear((10, 20, 30))
    s.fill_rect(0, 0, 4, 4, (255, 0, 0))
    raw = s.frame_bytes()
    assert len(raw) == 32 * 16 * 3
    assert raw[:3] == bytes((255, 0, 0))
    assert raw[-3:] == bytes((10, 20, 30))


def test_fill_rect_ignores_empty_and_fractional_sizes():
    s = PygameSurface(8, 8)
    s.clear((0, 0, 0))
    s.fill_rect(1.7, 2.2, 0.4, 3, (255, 255, 255))
    s.fill_rect(2, 2, 3, -1, (255, 255, 255))
    assert s.frame_bytes() == bytes(8 * 8 * 3)


def test_draws_onto_a_given_surface():
    target = pygame.Surface((20, 10))
    s = PygameSurface(20, 10, target)
    s.clear((1, 2, 3))
    assert target.get_at((5, 5))[:3] == (1, 2, 3)


def test_draw_text_renders_something():
    s = PygameSurface(200, 40)
    s.clear((0, 0, 0))
    s.draw_text("Heap sort", 2, 2, size="title")
    assert any(s.frame_bytes())


def test_movie_draws_a_full_frame():
    s = PygameSurface(160, 90)
    movie = get_movie("quick", bytes(range(50, 0, -1)), "frame")
    movie.advance(0, s)
    assert len(s.frame_bytes()) == 160 * 90 * 3


def test_recording_surface_keeps_text_since_last_clear():
    s = RecordingSurface(10, 10)
    s.draw_text("old", 0, 0)
    s.clear((0, 0, 0))
    s.draw_text("new", 0, 0)
    s.fill_rect(0, 0, 1, 1, (1, 1, 1))
    assert s.texts == ["new"]
    assert s.clears == 1
    assert s.calls[-1] == ("fill_rect", 0, 0, 1, 1, (1, 1, 1))


@pytest.mark.parametrize("value", [0, 64, 128, 200, 255])
def test_value_to_color_is_a_valid_rgb(value):
    c = value_to_color(value)
    assert len(c) == 3
    assert all(0 <= x <= 255 for x in c)
