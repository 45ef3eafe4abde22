from . import settings
from .engine import DONE, Span, SortMovie
from .heapsort import SiftUpHeapify

SMALL_SPAN = 4


class QuickSortMovie(SortMovie):
    """
    Quicksort with the recursion turned into an explicit span stack.

    Phases: "next" pops a span (and either bubble-sorts it in one go when
    it is tiny, or picks a pivot), "scan_left" / "scan_right" walk the two
    cursors one compare per step, "exchange" swaps a stalled pair.
    """
    title     = "Recursive quick sort"
    aux_space = "O(log n)"

    def __init__(self, name, data, tone=None):
        super().__init__(name, data, tone)
        self.stack       = []
        self.span        = None
        self.left        = 0
        self.right       = 0
        self.pivot_point = -1
        self.pivot_value = 0
        if self.n < 2:
            self.phase = DONE
        else:
            self.stack.append(Span(0, self.n - 1))
            self.phase = self.first_phase()

    def first_phase(self):
        return "next"

    # ------------------------------------------------------------------

    def step(self):
        if self.phase == "next":
            self.next_span()
        elif self.phase == "scan_left":
            if self.less_than(self.left, self.pivot_value):
                self.left += 1
            else:
                self.phase = "scan_right"
        elif self.phase == "scan_right":
            if self.greater_than(self.right, self.pivot_value):
                self.right -= 1
            elif self.left >= self.right:
                self.split()
            else:
                self.phase = "exchange"
        elif self.phase == "exchange":
            self.swap(self.left, self.right)
            self.left  += 1
            self.right -= 1
            self.phase = "scan_left"

    def next_span(self):
        if not self.stack:
            self.span  = None
            self.phase = DONE
            return
        span = self.check_span(self.stack.pop())
        self.span  = span
        self.left  = span.low
        self.right = span.high

        if span.high - span.low + 1 <= SMALL_SPAN:
            self.bubble(span.low, span.high)
            if not self.stack:
                self.phase = DONE
            return

        self.pivot_point = self.choose_pivot(span)
        self.median_of_three(span.low, self.pivot_point, span.high)
        self.pivot_value = self.hold(self.pivot_point)
        self.phase = "scan_left"

    def choose_pivot(self, span):
        return (span.low + span.high) // 2

    def median_of_three(self, lo, mid, hi):
        """Order the three samples so lo <= mid <= hi; they fence the scans."""
        if self.compare(hi, lo):
            self.swap(lo, hi)
        if self.compare(mid, lo):
            self.swap(lo, mid)
        if self.compare(hi, mid):
            self.swap(mid, hi)

    def bubble(self, lo, hi):
        for top in range(hi, lo, -1):
            for b in range(lo, top):
                if self.compare(b + 1, b):
                    self.swap(b, b + 1)

    def split(self):
        """
        Cursors have met; `right` is the last index of the low side. The
        high side starts one past it, so the spans never share an index and
        both are strictly smaller than their parent.
        """
        span = self.span
        cut  = min(max(self.right, span.low), span.high - 1)
        high_side = Span(cut + 1, span.high)
        low_side  = Span(span.low, cut)
        if high_side.high > high_side.low:
            self.stack.append(high_side)
        if low_side.high > low_side.low:
            self.stack.append(low_side)
        self.phase = "next" if self.stack else DONE

    # ------------------------------------------------------------------

    def header_lines(self):
        width = 0 if self.span is None else self.span.high - self.span.low + 1
        return [
            self.counter_text(),
            f"{self.steps} iterations, stack depth {len(self.stack)}, span {width} elements.",
            f"n = {self.n}; {self.complexity} = {self.estimate()}, {self.aux_space} auxiliary space",
        ]

    def draw(self, s):
        mid = s.height * 0.75
        xs  = self.x_scale(s)
        s.clear(settings.BACKGROUND_COLOR)
        s.fill_rect(0, 0, s.width, mid, settings.DATA_BG_COLOR)  # top: data, bottom: stack "flame graph"

        if self.span is not None:
            s.fill_rect(self.span.low * xs, mid + 1,
                        (self.span.high - self.span.low + 1) * xs, 10, settings.CURSOR_SPAN)
            pp = mid - self.pivot_value * (mid / 255.0)
            s.fill_rect(self.pivot_point * xs, pp, 4, mid - pp, settings.CURSOR_MID)
        s.fill_rect(self.left * xs, mid + 1, 4, 10, settings.CURSOR_LEFT)
        s.fill_rect(self.right * xs, mid + 1, 4, 10, settings.CURSOR_RIGHT)

        self.draw_spans(s, reversed(self.stack), mid + 15)
        self.draw_points(s, self.data, 0, mid)
        self.draw_header(s)


class PrephaseQuickSortMovie(SiftUpHeapify, QuickSortMovie):
    """
    Heapify the whole buffer first (same sift-up as the heap sort), then
    quicksort. The heap leaves larger keys toward the right, so the pivot is
    taken right of centre.
    """
    title = "Recursive quick sort with pre-sort"

    def first_phase(self):
        self.start_heapify(0, self.n)
        return "heapify"

    def step(self):
        if self.phase == "heapify":
            if self.heapify_step():
                self.left  = self.head
                self.right = self.head if self.sift is None else self.sift
                return
            self.phase = "next"
        super().step()

    def choose_pivot(self, span):
        width = span.high - span.low
        return span.high - ((width >> 1) - 1)
