from . import settings
from .engine import DONE, SortMovie

# The heap here is a min-heap laid over the buffer with parent(i) = i >> 1.
# That makes index 0 a lone root above index 1, and 1 the root of an
# ordinary binary heap over the rest. After heapify, data[0] is the global
# minimum and never moves again.


class SiftUpHeapify:
    """
    Heapify a window of the buffer one sift-up move at a time.
    Mixed into movies that need a heap phase.
    """

    def start_heapify(self, base, size):
        self.heap_base = base
        self.heap_size = size
        self.head      = 0
        self.sift      = None
        self.held      = None

    def heapify_step(self) -> bool:
        """One move of the current sift. False once the window is a heap."""
        b = self.heap_base
        if self.sift is None:
            self.head += 1
            if self.head >= self.heap_size:
                return False
            self.sift = self.head
            self.held = self.hold(b + self.head)

        if self.sift > 0 and self.greater_than(b + (self.sift >> 1), self.held):
            self.copy(b + self.sift, b + (self.sift >> 1))  # push larger values toward the right
            self.sift >>= 1
        else:
            self.write(b + self.sift, self.held)
            self.sift = None
        return True


class HeapSortMovie(SiftUpHeapify, SortMovie):
    title     = "Iterative heap sort"
    aux_space = "O(1)"

    def __init__(self, name, data, tone=None):
        super().__init__(name, data, tone)
        self.end    = 0
        self.taken  = None
        self.last   = None
        self.front  = self.back = self.mid = -1
        self.start_heapify(0, self.n)
        self.phase  = "heapify" if self.n >= 2 else DONE

    def step(self):
        if self.phase == "heapify":
            if self.heapify_step():
                self.front, self.mid = self.head, self.sift
                return
            self.phase = "extract"
            self.end   = self.n - 1
            self.sift  = None

        if self.phase == "extract":
            if self.extract_step():
                return
            self.phase = "reverse"
            self.front, self.back = self.n - 1, 1

        if self.phase == "reverse":
            l, r = self.back, self.front
            if l < r:
                self.swap(l, r)
                self.back, self.front, self.mid = l + 1, r - 1, -1
            if self.back >= self.front:
                self.phase = DONE

    def extract_step(self) -> bool:
        """
        Take the root as the next smallest, sift the last heap element down
        into its place one level per call, then park the root at the end.
        """
        if self.sift is None:
            if self.end < 1:
                return False
            self.taken = self.hold(1)
            self.last  = self.hold(self.end)
            self.end  -= 1
            self.sift  = 1
            self.back  = self.end
            return True

        i = self.sift
        if i * 2 <= self.end:
            child = i * 2
            if child < self.end and not self.compare(child, child + 1):
                child += 1
            self.front, self.mid = i, child
            if self.less_than(child, self.last):
                self.copy(i, child)
                self.sift = child
                return True

        self.write(i, self.last)
        self.write(self.end + 1, self.taken)
        self.sift = None
        return True

    def draw(self, s):
        s.clear(settings.BACKGROUND_COLOR)
        self.draw_marker(s, self.back, 0, s.height, settings.CURSOR_MARK)
        self.draw_marker(s, self.mid, 0, s.height, settings.CURSOR_MID)
        self.draw_marker(s, self.front, 0, s.height, (165, 42, 42))
        self.draw_points(s, self.data, 0, s.height)
        self.draw_header(s)


class RepeatedHeapSortMovie(SiftUpHeapify, SortMovie):
    """
    Deliberately naive: heapify [offset, n) from scratch, which leaves the
    two smallest keys at the front of the window, then move on by two.
    O(n^2), kept as a baseline to compare the real heap sort against.
    """
    title      = "Repeated heap sort"
    complexity = "O(n^2)"
    aux_space  = "O(1)"

    def __init__(self, name, data, tone=None):
        super().__init__(name, data, tone)
        self.offset = 0
        self.start_heapify(0, self.n)
        self.phase = "window" if self.n >= 2 else DONE

    def estimate(self):
        return self.n * self.n

    def step(self):
        while not self.heapify_step():
            self.offset += 2
            if self.n - self.offset < 2:
                self.phase = DONE
                return
            self.start_heapify(self.offset, self.n - self.offset)

    def draw(self, s):
        s.clear(settings.BACKGROUND_COLOR)
        self.draw_marker(s, self.offset, 0, s.height, settings.CURSOR_MARK)
        if self.sift is not None:
            self.draw_marker(s, self.offset + self.sift, 0, s.height, settings.CURSOR_MID)
        self.draw_marker(s, self.offset + self.head, 0, s.height, (165, 42, 42))
        self.draw_points(s, self.data, 0, s.height)
        self.draw_header(s)
