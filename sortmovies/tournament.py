from . import settings
from .engine import DONE, SortMovie
from .errors import InvariantViolation

# A tiny fixed heap: root, two mids, four leaves.
#            0
#       1         2
#     3   4     5   6
ROOT   = 0
MIDS   = (1, 2)
LEAVES = (3, 4, 5, 6)
SLOTS  = 7


def parent(slot):
    return (slot - 1) >> 1


def children(slot):
    return 2 * slot + 1, 2 * slot + 2


class HeapSlot:
    __slots__ = ("value", "occupied", "locked")

    def __init__(self, value=0, occupied=False, locked=False):
        self.value    = value
        self.occupied = occupied
        self.locked   = locked

    @property
    def mobile(self):
        return self.occupied and not self.locked

    def __repr__(self):
        state = "locked" if self.locked else ("full" if self.occupied else "empty")
        return f"HeapSlot({self.value}, {state})"


class TournamentSortMovie(SortMovie):
    """
    Replacement selection through a 7 slot heap, then merging.

    Keys stream through the heap; the root is popped to the output as long
    as it keeps the current run in order. A key that arrives smaller than
    the last one written is locked and sits out until the next run. Each
    finished run is merged into the sorted prefix built so far.
    """
    title     = "Tournament sort"
    aux_space = "O(n)"

    def __init__(self, name, data, tone=None):
        super().__init__(name, data, tone)
        self.heap         = [HeapSlot() for _ in range(SLOTS)]
        self.out          = 0     # next output position
        self.inp          = 0     # next unread input position
        self.last_written = -1
        self.sorted_end   = 0     # [0, sorted_end) is sorted
        self.runs         = 0
        self.vacated_mid  = None
        self.vacated_leaf = None
        self.temp         = None
        self.ml = self.mr = self.mt = 0
        self.phase = "fill" if self.n > 1 else DONE

    # ------------------------------------------------------------------
    # heap primitives
    # ------------------------------------------------------------------

    def compare_slots(self, a, b) -> bool:
        return self.compare_values(self.heap[a].value, self.heap[b].value)

    def fill_slot(self, slot, value):
        if self.heap[slot].occupied:
            raise InvariantViolation(f"tournament: slot {slot} filled while occupied")
        locked = self.compare_values(value, self.last_written)
        self.heap[slot] = HeapSlot(value, True, locked)

    def move_slot(self, dst, src):
        self.counters.copies += 1
        self.heap[dst] = self.heap[src]
        self.heap[src] = HeapSlot()
        self.touched_value = self.heap[dst].value

    def swap_slots(self, a, b):
        self.counters.copies += 3
        self.counters.swaps  += 1
        self.heap[a], self.heap[b] = self.heap[b], self.heap[a]
        self.touched_value = self.heap[a].value

    def sift_down(self, slot):
        """Empty slots count as larger than anything."""
        while True:
            best = slot
            for c in children(slot):
                if c < SLOTS and self.heap[c].occupied and (
                        not self.heap[best].occupied or self.compare_slots(c, best)):
                    best = c
            if best == slot:
                return
            self.swap_slots(slot, best)
            slot = best

    def check_heap(self):
        for slot in range(1, SLOTS):
            s = self.heap[slot]
            if not s.mobile:
                continue
            p = self.heap[parent(slot)]
            if not p.mobile or p.value > s.value:
                raise InvariantViolation(
                    f"tournament: heap order broken at slot {slot}: {self.heap}")

    def smaller_mobile(self, slots):
        pick = None
        for slot in slots:
            if not self.heap[slot].mobile:
                continue
            if pick is None or self.compare_slots(slot, pick):
                pick = slot
        return pick

    # ------------------------------------------------------------------

    def step(self):
        phase = self.phase
        if phase == "fill":
            self.fill_step()
        elif phase == "pop":
            self.pop_step()
        elif phase == "bubble_top":
            self.vacated_mid = self.smaller_mobile(MIDS)
            if self.vacated_mid is not None:
                self.move_slot(ROOT, self.vacated_mid)
            self.phase = "bubble_mid"
        elif phase == "bubble_mid":
            self.vacated_leaf = None
            if self.vacated_mid is not None:
                self.vacated_leaf = self.smaller_mobile(children(self.vacated_mid))
                if self.vacated_leaf is not None:
                    self.move_slot(self.vacated_mid, self.vacated_leaf)
            self.phase = "refill"
        elif phase == "refill":
            leaf = self.vacated_leaf
            if leaf is not None and self.inp < self.n:
                self.fill_slot(leaf, self.hold(self.inp))
                self.inp += 1
                self.phase = "reorder"
            else:
                self.phase = "pop"
        elif phase == "reorder":
            self.reorder(self.vacated_leaf)
            self.phase = "pop"
        elif phase == "merge":
            self.merge_step()
        elif phase == "copy_back":
            self.copy_back_step()

    def fill_step(self):
        if self.inp < self.n:
            for slot in range(SLOTS):
                if not self.heap[slot].occupied:
                    self.fill_slot(slot, self.hold(self.inp))
                    self.inp += 1
                    return

        # heap is full (or input is gone): start a new run
        for slot in self.heap:
            slot.locked = False
        for slot in (2, 1, ROOT):
            self.sift_down(slot)
        self.check_heap()
        self.phase = "pop"

    def pop_step(self):
        root = self.heap[ROOT]
        if not root.occupied:
            self.end_run()
            return
        if root.locked:
            raise InvariantViolation("tournament: popped a locked root")
        self.write(self.out, root.value)
        self.out += 1
        self.last_written = root.value
        self.heap[ROOT] = HeapSlot()
        self.phase = "bubble_top"

    def reorder(self, leaf):
        # a locked leaf belongs to the next run and stays put
        if not self.heap[leaf].mobile:
            return
        mid = parent(leaf)
        if not self.compare_slots(leaf, mid):
            return
        self.swap_slots(leaf, mid)
        if self.heap[ROOT].occupied and self.compare_slots(mid, ROOT):
            self.swap_slots(mid, ROOT)

    def end_run(self):
        self.runs += 1
        if self.sorted_end == 0:
            self.sorted_end = self.out
            self.next_run()
            return
        self.temp  = bytearray(self.out)
        self.ml, self.mr, self.mt = 0, self.sorted_end, 0
        self.phase = "merge"

    def next_run(self):
        if self.sorted_end >= self.n:
            self.phase = DONE
            return
        self.last_written = -1
        self.phase = "fill"

    def merge_step(self):
        if self.ml < self.sorted_end and self.mr < self.out:
            take_left = not self.compare(self.mr, self.ml)
        else:
            take_left = self.ml < self.sorted_end
        if take_left:
            self.copy(self.mt, self.ml, dst_buf=self.temp)
            self.ml += 1
        else:
            self.copy(self.mt, self.mr, dst_buf=self.temp)
            self.mr += 1
        self.mt += 1
        if self.mt >= self.out:
            self.mt = 0
            self.phase = "copy_back"

    def copy_back_step(self):
        self.copy(self.mt, self.mt, dst_buf=self.data, src_buf=self.temp)
        self.mt += 1
        if self.mt >= self.out:
            self.sorted_end = self.out
            self.temp = None
            self.next_run()

    # ------------------------------------------------------------------

    def header_lines(self):
        return [
            self.counter_text(),
            f"{self.steps} iterations, {self.runs} runs, {self.sorted_end} sorted.",
            f"n = {self.n}; {self.complexity} = {self.estimate()}, {self.aux_space} auxiliary space",
        ]

    def draw(self, s):
        mid = s.height * 0.5
        xs  = self.x_scale(s)
        ys  = mid / 255.0
        s.clear(settings.BACKGROUND_COLOR)
        s.fill_rect(0, 0, s.width, mid, settings.DATA_BG_COLOR)

        s.fill_rect(self.out * xs, 0, 4, mid, settings.CURSOR_LEFT)
        s.fill_rect(self.inp * xs, 0, 4, mid, settings.CURSOR_MARK)
        self.draw_marker(s, self.sorted_end, mid, 10, settings.CURSOR_GOLD)

        pos = 20
        for slot in self.heap:
            color = (165, 42, 42)
            if slot.occupied:
                color = settings.CURSOR_STACK
            if slot.locked:
                color = (220, 220, 220)
            s.fill_rect(pos, mid + 12, 8, (slot.value + 10) * ys * 0.75, color)
            pos += 8

        # only the sorted prefix and unread input hold meaningful keys
        self.draw_points(s, self.data, 0, mid, limit=self.out)
        for i in range(self.inp, self.n):
            s.fill_rect(i * xs - 2, mid - self.data[i] * ys - 2, 4, 4, settings.POINT_COLOR)
        if self.temp is not None:
            limit = self.mt if self.phase == "merge" else None
            self.draw_points(s, self.temp, mid, mid, (255, 255, 255), limit=limit)
        self.draw_header(s)
