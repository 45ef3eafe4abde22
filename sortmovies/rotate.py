from . import settings
from .engine import DONE, SortMovie
from .surface import value_to_color


class TrinityRotateMovie(SortMovie):
    """
    Rotate the buffer left by `places`, in place, with the trinity
    (conjoined triple reversal) method. The three reversals of the classic
    method are run together: 4-way cycles while both blocks overlap, 3-way
    cycles once the shorter block is used up, then plain swaps.

    Cursors A..D start at 0, split, split, n. A and C move up, B and D down.
    """
    title      = "Trinity rotation"
    complexity = "O(n)"
    aux_space  = "O(1)"

    def __init__(self, name, data, places, tone=None):
        super().__init__(name, data, tone)
        self.places = places
        self.centre = places % self.n if self.n else 0
        self.left   = self.centre
        self.right  = self.n - self.centre
        self.a, self.b, self.c, self.d = 0, self.left, self.left, self.n
        self.loop   = 0
        if self.n < 2 or self.centre == 0:
            self.phase = DONE
        else:
            self.enter("four")

    def estimate(self):
        return self.n

    def enter(self, phase):
        """Set up the loop count for `phase`, skipping any that have no work."""
        while phase != DONE:
            if phase == "four":
                self.loop = min(self.left, self.right) // 2
                nxt = "three"
            elif phase == "three":
                if self.left < self.right:
                    self.loop = (self.d - self.c) // 2
                else:
                    self.loop = (self.b - self.a) // 2
                nxt = "two"
            else:
                self.loop = (self.d - self.a) // 2
                nxt = DONE
            if self.loop > 0:
                break
            phase = nxt
        self.phase = phase

    def step(self):
        if self.phase == "four":
            self.b -= 1
            self.d -= 1
            self.cycle(self.b, self.a, self.c, self.d)
            self.a += 1
            self.c += 1
            nxt = "three"
        elif self.phase == "three":
            self.d -= 1
            if self.left < self.right:
                self.cycle(self.c, self.d, self.a)
                self.c += 1
            else:
                self.b -= 1
                self.cycle(self.b, self.a, self.d)
            self.a += 1
            nxt = "two"
        else:
            self.d -= 1
            self.swap(self.a, self.d)
            self.a += 1
            nxt = DONE

        self.loop -= 1
        if self.loop == 0:
            self.enter(nxt)

    def header_lines(self):
        c = self.counters
        return [
            f"{c.copies} copies, {c.swaps} swaps, {self.steps} iterations.",
            f"n = {self.n}; {self.complexity} = {self.estimate()}, {self.aux_space} auxiliary space",
        ]

    def draw(self, s):
        xs = self.x_scale(s)
        ys = s.height / 260.0
        w  = max(4, xs)
        s.clear(settings.BACKGROUND_COLOR)
        s.draw_text(f"Rotate array, trinity method. {self.n} items by {self.places} places",
                    10, 24, size="title")
        y = 70
        for line in self.header_lines():
            s.draw_text(line, 10, y)
            y += 20

        s.fill_rect((self.a - 1) * xs, 0, w, s.height, settings.CURSOR_RIGHT)
        s.fill_rect((self.b + 1) * xs, 0, w, s.height, settings.CURSOR_LEFT)
        s.fill_rect((self.c - 1) * xs, 0, w, s.height, settings.CURSOR_STACK)
        s.fill_rect((self.d + 1) * xs, 0, w, s.height, (221, 160, 221))
        s.fill_rect(self.centre * xs, 0, w, s.height, settings.DATA_BG_COLOR)
        s.fill_rect((self.n - self.centre) * xs, 0, w, s.height, settings.CURSOR_MID)

        bar = max(2, xs if xs < 3 else xs - 2)
        for i in range(self.n):
            top = s.height - (self.data[i] + 1) * ys
            s.fill_rect(i * xs, top, bar, s.height - top, value_to_color(self.data[i]))
