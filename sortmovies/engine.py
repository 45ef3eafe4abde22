"""
Frame-stepped algorithm engine.

Every movie is a state machine over a byte buffer. `advance()` draws the
current state, then performs exactly one step: a single primitive
operation, or one small bounded burst (a 4 element bubble pass, a
median-of-three, ...). All state needed to resume lives in attributes:
cursors, an explicit span stack or queue, and a phase name. Nothing is
kept on the Python call stack between calls, so the driver can pull frames
at any pace and stop whenever it likes.

Counters are only ever touched by the primitives below (compare, copy,
swap ...), which makes them an exact audit of the work done.
"""
import math
from collections import namedtuple

from . import settings
from .errors import InvariantViolation

# Inclusive index bounds plus one tag (radix bit, phase hint ...)
Span = namedtuple("Span", "low high extra", defaults=(None,))

DONE = "done"


class Counters:
    __slots__ = ("compares", "copies", "swaps", "inspections", "buffer_swaps")

    def __init__(self):
        self.compares     = 0
        self.copies       = 0
        self.swaps        = 0
        self.inspections  = 0
        self.buffer_swaps = 0

    def as_dict(self):
        return {k: getattr(self, k) for k in self.__slots__}

    def __repr__(self):
        return "Counters(%s)" % ", ".join(f"{k}={v}" for k, v in self.as_dict().items())


class SortMovie:
    """
    Base state machine. Subclasses set `title`, `complexity`, `aux_space`,
    implement `step()` (one unit of work, sets `self.phase = DONE` when
    finished) and usually `draw()`.
    """
    title      = "Sort"
    complexity = "O(n log n)"
    aux_space  = "O(1)"

    def __init__(self, name, data, tone=None):
        self.name     = name
        self.data     = bytearray(data)
        self.n        = len(self.data)
        self.other    = None     # second buffer, for out-of-place movies
        self.a_is_source = True
        self.counters = Counters()
        self.steps    = 0
        self.frame    = 0
        self.phase    = None
        self.tone     = tone
        self.failure  = None
        self.touched_value = None

    # ------------------------------------------------------------------
    # driving
    # ------------------------------------------------------------------

    @property
    def done(self):
        return self.phase == DONE

    @property
    def result(self):
        """The buffer that holds the ordering once the machine is done."""
        return self.source

    @property
    def source(self):
        return self.data if self.a_is_source else self.other

    @property
    def dest(self):
        if self.other is None:
            return self.data
        return self.other if self.a_is_source else self.data

    def advance(self, frame=0, surface=None) -> bool:
        """
        Draw the current state (when given a surface), then do one step.
        Returns True while there is more work. Past the end it only draws.
        """
        self.frame = frame
        if surface is not None:
            self.draw(surface)
        if not self.done:
            self.touched_value = None
            try:
                self.step()
            except InvariantViolation as e:
                self._fail(e)
                raise
            except IndexError as e:
                err = InvariantViolation(f"{type(self).__name__}: {e}")
                self._fail(err)
                raise err from e
            self.steps += 1
            if self.tone is not None and self.touched_value is not None:
                self.tone.trigger(self.touched_value)
        if self.tone is not None:
            self.tone.render_frame()
        return not self.done

    def _fail(self, exc):
        self.failure = exc
        self.phase = DONE

    def render(self, surface):
        """Draw without stepping."""
        self.draw(surface)

    def run(self, max_steps=None):
        """Drive to the end without drawing. Returns the number of steps taken."""
        start = self.steps
        while not self.done:
            if max_steps is not None and self.steps - start >= max_steps:
                break
            self.advance(self.steps)
        return self.steps - start

    def step(self):
        raise NotImplementedError

    def tone_value(self):
        return self.touched_value

    def audio_samples(self) -> bytes:
        if self.tone is None:
            return b""
        return self.tone.pcm_bytes()

    # ------------------------------------------------------------------
    # primitives: the only places counters move
    # ------------------------------------------------------------------

    def _check(self, i, buf=None):
        size = self.n if buf is None else len(buf)
        if not 0 <= i < size:
            raise InvariantViolation(
                f"{type(self).__name__}: index {i} outside buffer of {size}")

    def check_span(self, span):
        if span.low > span.high:
            raise InvariantViolation(
                f"{type(self).__name__}: inverted span {span.low}..{span.high}")
        self._check(span.low)
        self._check(span.high)
        return span

    def compare(self, i, j) -> bool:
        """source[i] < source[j]"""
        self._check(i); self._check(j)
        self.counters.compares += 1
        a, b = self.source[i], self.source[j]
        self.touched_value = a
        return a < b

    def less_than(self, i, value) -> bool:
        self._check(i)
        self.counters.compares += 1
        self.touched_value = self.source[i]
        return self.source[i] < value

    def greater_than(self, i, value) -> bool:
        self._check(i)
        self.counters.compares += 1
        self.touched_value = self.source[i]
        return self.source[i] > value

    def compare_values(self, a, b) -> bool:
        """a < b, for values already held outside the buffer."""
        self.counters.compares += 1
        self.touched_value = a
        return a < b

    def copy(self, dst, src, dst_buf=None, src_buf=None):
        dst_buf = self.dest if dst_buf is None else dst_buf
        src_buf = self.source if src_buf is None else src_buf
        self._check(dst, dst_buf); self._check(src, src_buf)
        self.counters.copies += 1
        dst_buf[dst] = src_buf[src]
        self.touched_value = src_buf[src]

    def hold(self, i):
        """Read a key out into a temporary."""
        self._check(i)
        self.counters.copies += 1
        self.touched_value = self.data[i]
        return self.data[i]

    def write(self, i, value, buf=None):
        buf = self.data if buf is None else buf
        self._check(i, buf)
        self.counters.copies += 1
        buf[i] = value
        self.touched_value = value

    def swap(self, i, j):
        self._check(i); self._check(j)
        self.counters.copies += 3
        self.counters.swaps  += 1
        d = self.source
        d[i], d[j] = d[j], d[i]
        self.touched_value = d[i]

    def cycle(self, *indices):
        """
        Rotate values through cells: indices[0] takes indices[1]'s value,
        indices[1] takes indices[2]'s ... the last takes indices[0]'s.
        One temporary, so len(indices) + 1 moves.
        """
        for i in indices:
            self._check(i)
        d = self.data
        first = d[indices[0]]
        for a, b in zip(indices, indices[1:]):
            d[a] = d[b]
        d[indices[-1]] = first
        self.counters.copies += len(indices) + 1
        self.counters.swaps  += 1
        self.touched_value = first

    def swap_buffers(self):
        self.a_is_source = not self.a_is_source
        self.counters.buffer_swaps += 1

    def bit_is_set(self, i, bit) -> bool:
        self._check(i)
        self.counters.inspections += 1
        self.touched_value = self.source[i]
        return (self.source[i] >> bit) & 1 == 1

    # ------------------------------------------------------------------
    # drawing helpers
    # ------------------------------------------------------------------

    def estimate(self):
        if self.n < 2:
            return self.n
        return int(math.log2(self.n) * self.n)

    def counter_text(self):
        c = self.counters
        return f"{c.compares} compares, {c.copies} copies, {c.swaps} swaps"

    def header_lines(self):
        return [
            self.counter_text(),
            f"{self.steps} iterations",
            f"n = {self.n}; {self.complexity} = {self.estimate()}, {self.aux_space} auxiliary space",
        ]

    def draw_header(self, s, lines=None):
        s.draw_text(f"{self.title}. {self.n} items ({self.name})", 10, 24, size="title")
        y = 70
        for line in (self.header_lines() if lines is None else lines):
            s.draw_text(line, 10, y)
            y += 20

    def x_scale(self, s):
        return s.width / (self.n + 1.0)

    def draw_points(self, s, buf, top, height, color=settings.POINT_COLOR, limit=None):
        xs = self.x_scale(s)
        ys = height / 255.0
        bottom = top + height
        for i in range(len(buf) if limit is None else limit):
            s.fill_rect(i * xs - 2, bottom - buf[i] * ys - 2, 4, 4, color)

    def draw_marker(self, s, idx, top, height, color, w=4):
        if idx is None or idx < 0:
            return
        s.fill_rect(idx * self.x_scale(s) - w / 2, top, w, height, color)

    def draw_spans(self, s, spans, top, color=settings.CURSOR_STACK):
        """Stack "flame graph": one thin bar per pending span."""
        xs = self.x_scale(s)
        y = top
        for span in spans:
            s.fill_rect(span.low * xs, y, (span.high - span.low + 1) * xs, 4, color)
            y += 4

    def draw(self, s):
        s.clear(settings.BACKGROUND_COLOR)
        self.draw_points(s, self.data, 0, s.height)
        self.draw_header(s)
