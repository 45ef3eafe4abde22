from collections import deque

from . import settings
from .engine import DONE, Span, SortMovie

KEY_BITS = 8


class InPlaceRadixMovie(SortMovie):
    """
    MSD radix sort on bits, in place. Each span is split on one bit by two
    converging cursors; both halves then go back on the stack one bit lower.
    """
    title      = "In place MSD radix sort"
    complexity = "O(kn)"
    aux_space  = "O(log n)"

    def __init__(self, name, data, tone=None):
        super().__init__(name, data, tone)
        self.stack      = []
        self.span       = None
        self.left       = 0
        self.right      = 0
        self.bit        = KEY_BITS - 1
        self.last_split = None
        if self.n < 2:
            self.phase = DONE
        else:
            self.stack.append(Span(0, self.n - 1, KEY_BITS - 1))
            self.phase = "next"

    def estimate(self):
        return KEY_BITS * self.n

    def step(self):
        if self.phase == "next":
            span = self.check_span(self.stack.pop())
            self.span  = span
            self.left  = span.low
            self.right = span.high
            self.bit   = span.extra
            self.phase = "partition"

        if self.left < self.right:
            # find a pair that are both on the wrong side and swap them
            if not self.bit_is_set(self.left, self.bit):
                self.left += 1
            elif self.bit_is_set(self.right, self.bit):
                self.right -= 1
            else:
                self.swap(self.left, self.right)
            return

        self.finish_span()

    def finish_span(self):
        span = self.span
        split = self.left if self.bit_is_set(self.left, self.bit) else self.left + 1
        self.last_split = (span.low, split, span.high, self.bit)

        if self.bit > 0:
            ones  = Span(split, span.high, self.bit - 1)
            zeros = Span(span.low, split - 1, self.bit - 1)
            if ones.high > ones.low:
                self.stack.append(ones)
            if zeros.high > zeros.low:
                self.stack.append(zeros)
        self.phase = "next" if self.stack else DONE

    def header_lines(self):
        c = self.counters
        width = 0 if self.span is None else self.span.high - self.span.low + 1
        return [
            f"{c.inspections} inspections, {c.copies} copies, {c.swaps} swaps",
            f"{self.steps} iterations, stack depth {len(self.stack)}, span {width} elements, bit {self.bit}.",
            f"n = {self.n}; {self.complexity} = {self.estimate()}, {self.aux_space} auxiliary space",
        ]

    def draw(self, s):
        mid = s.height * 0.75
        xs  = self.x_scale(s)
        s.clear(settings.BACKGROUND_COLOR)
        s.fill_rect(0, 0, s.width, mid, settings.DATA_BG_COLOR)

        if self.span is not None:
            s.fill_rect(self.span.low * xs, mid + 1,
                        (self.span.high - self.span.low + 1) * xs, 10, settings.CURSOR_SPAN)
        s.fill_rect(self.left * xs, mid + 1, 4, 10, settings.CURSOR_LEFT)
        s.fill_rect(self.right * xs, mid + 1, 4, 10, settings.CURSOR_RIGHT)

        self.draw_spans(s, reversed(self.stack), mid + 15)
        self.draw_points(s, self.data, 0, mid)
        self.draw_header(s)


class RadixMergeMovie(SortMovie):
    """
    Somewhere between quicksort and merge sort: spans are split on one bit
    into the other buffer, zeros written forward from the left, ones
    backward from the right. Spans are queued, not stacked, so a whole bit
    level is finished (and the buffers swapped) before the next starts.
    """
    title      = "MSD Radix merge"
    complexity = "O(kn)"
    aux_space  = "O(2n)"

    def __init__(self, name, data, tone=None):
        super().__init__(name, data, tone)
        self.other = bytearray(self.n)
        self.queue = deque()
        self.level = KEY_BITS - 1
        self.span  = None
        self.left_insert = self.right_insert = self.read_point = -1
        if self.n < 2:
            self.phase = DONE
        else:
            self.queue.append(Span(0, self.n - 1, KEY_BITS - 1))
            self.phase = "next"

    def estimate(self):
        return KEY_BITS * self.n

    def step(self):
        if self.phase == "next":
            span = self.check_span(self.queue.popleft())
            if span.extra != self.level:
                self.level = span.extra
                self.swap_buffers()
            self.span  = span
            self.left_insert  = span.low
            self.right_insert = span.high
            self.read_point   = span.low
            self.phase = "split"

        span, pos = self.span, self.read_point
        if self.bit_is_set(pos, span.extra):
            self.copy(self.right_insert, pos)
            self.right_insert -= 1
        else:
            self.copy(self.left_insert, pos)
            self.left_insert += 1
        self.read_point += 1
        if self.read_point <= span.high:
            return

        # every non-empty half goes on, so each key is carried to every level
        if span.extra > 0:
            if self.right_insert >= span.low:
                self.queue.append(Span(span.low, self.right_insert, span.extra - 1))
            if self.left_insert <= span.high:
                self.queue.append(Span(self.left_insert, span.high, span.extra - 1))
        if self.queue:
            self.phase = "next"
        else:
            self.swap_buffers()  # leave the finished level as the source
            self.phase = DONE

    def header_lines(self):
        c = self.counters
        return [
            f"{c.inspections} inspections, {c.copies} copies, {c.buffer_swaps} buffer swaps, "
            f"{self.steps} iterations, radix {self.level}",
            f"n = {self.n}; {self.complexity} = {self.estimate()}, {self.aux_space} auxiliary space",
        ]

    def draw(self, s):
        mid = s.height / 2.0
        src_top, dst_top = (0, mid) if self.a_is_source else (mid, 0)
        s.clear(settings.BACKGROUND_COLOR)  # black is destination
        s.fill_rect(0, src_top, s.width, mid, settings.DATA_BG_COLOR)  # blue is source

        self.draw_marker(s, self.left_insert - 1, dst_top, mid, settings.CURSOR_RIGHT, w=2)
        self.draw_marker(s, self.right_insert + 1, dst_top, mid, settings.CURSOR_LEFT, w=2)
        self.draw_marker(s, self.read_point, src_top, mid, settings.CURSOR_MID, w=2)

        self.draw_points(s, self.data, 0, mid, (255, 255, 255))
        self.draw_points(s, self.other, mid, mid, (255, 255, 255))
        self.draw_header(s)
