from . import settings
from .engine import DONE, SortMovie


class MergeSortMovie(SortMovie):
    """
    Bottom-up merge sort, double buffered. Each step copies one key from
    the source buffer into the destination; after every full pass at a
    given stride the two buffers trade places.
    """
    title     = "Bottom up merge"
    aux_space = "n"

    def __init__(self, name, data, tone=None):
        super().__init__(name, data, tone)
        self.other  = bytearray(self.n)
        self.stride = 1
        self.window = 0
        self.l = self.r = self.mid = self.end = self.t = 0
        self.last_left = self.last_right = self.last_insert = -1
        if self.n < 2:
            self.phase = DONE
        else:
            self.open_window(0)
            self.phase = "merge"

    def open_window(self, left):
        # windows at the tail can run off the end of the data
        self.window = left
        self.mid = min(left + self.stride, self.n)
        self.end = min(left + 2 * self.stride, self.n)
        self.l   = left
        self.r   = self.mid
        self.t   = left

    def step(self):
        self.last_left, self.last_right, self.last_insert = self.l, self.r, self.t

        if self.l < self.mid and self.r < self.end:
            take_left = not self.compare(self.r, self.l)  # tie goes left
        else:
            take_left = self.l < self.mid

        if take_left:
            self.copy(self.t, self.l)
            self.l += 1
        else:
            self.copy(self.t, self.r)
            self.r += 1
        self.t += 1

        if self.l < self.mid or self.r < self.end:
            return

        nxt = self.window + 2 * self.stride
        if nxt < self.n:
            self.open_window(nxt)
            return

        self.swap_buffers()
        self.stride <<= 1
        if self.stride >= self.n:
            self.phase = DONE
        else:
            self.open_window(0)

    def header_lines(self):
        return [
            f"{self.counter_text()}, {self.counters.buffer_swaps} buffer swaps, "
            f"{self.steps} iterations, window {self.stride} wide.",
            f"n = {self.n}; {self.complexity} = {self.estimate()}, {self.aux_space} auxiliary space",
        ]

    def draw(self, s):
        mid = s.height / 2.0
        src_top, dst_top = (0, mid) if self.a_is_source else (mid, 0)
        s.clear(settings.BACKGROUND_COLOR)
        s.fill_rect(0, src_top, s.width, mid, settings.DATA_BG_COLOR)

        self.draw_marker(s, self.last_left - 1, src_top, mid, settings.CURSOR_RIGHT, w=2)
        self.draw_marker(s, self.last_right + 1, src_top, mid, settings.CURSOR_LEFT, w=2)
        self.draw_marker(s, self.last_insert, dst_top, mid, settings.CURSOR_MID, w=2)

        self.draw_points(s, self.data, 0, mid, (255, 255, 255))
        self.draw_points(s, self.other, mid, mid, (255, 255, 255))
        self.draw_header(s)
