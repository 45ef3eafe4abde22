import math

import pytest

from sortmovies.heapsort import HeapSortMovie, RepeatedHeapSortMovie
from sortmovies.mergesort import MergeSortMovie
from sortmovies.radix import InPlaceRadixMovie, RadixMergeMovie

from conftest import make_input


@pytest.mark.parametrize("n", [2, 3, 5, 127, 128, 1024])
def test_merge_swaps_buffers_once_per_pass(n):
    movie = MergeSortMovie("m", make_input("random", n))
    movie.run()
    passes = math.ceil(math.log2(n))
    assert movie.counters.buffer_swaps == passes
    assert movie.counters.copies == passes * n
    assert movie.steps == passes * n


@pytest.mark.parametrize("n", [2, 3, 127, 1024])
def test_radix_merge_carries_every_key_through_every_bit(n, input_kind):
    movie = RadixMergeMovie("r", make_input(input_kind, n))
    movie.run()
    assert movie.counters.copies == 8 * n
    assert movie.counters.inspections == 8 * n
    assert movie.counters.buffer_swaps == 8
    assert movie.counters.compares == 0


@pytest.mark.parametrize("kind", ["random", "sorted", "reversed"])
def test_heap_sort_compares_are_n_log_n(kind):
    n = 1024
    movie = HeapSortMovie("h", make_input(kind, n))
    movie.run()
    # Heapify is by sift-up insertion, not bottom-up. On reversed input every
    # new key is the smallest yet and climbs to the root, so the total lands
    # above 2N log2 N (23220 against 20480 at N = 1024).
    assert movie.counters.compares <= 2 * n * math.log2(n) + 4 * n


def test_heap_sort_reverse_pass_is_n_over_2_swaps():
    n = 100
    movie = HeapSortMovie("h", make_input("random", n))
    movie.run()
    assert movie.counters.swaps == (n - 1) // 2


def test_repeated_heap_is_quadratic():
    n = 128
    fast = HeapSortMovie("h", make_input("random", n))
    slow = RepeatedHeapSortMovie("r", make_input("random", n))
    fast.run()
    slow.run()
    # every window re-inserts each of its keys at least once
    assert slow.counters.compares >= n * n // 4
    assert slow.counters.compares > fast.counters.compares


@pytest.mark.parametrize("n", [127, 1024])
def test_in_place_radix_inspections_and_depth(n, input_kind):
    movie = InPlaceRadixMovie("r", make_input(input_kind, n))
    deepest = 0
    while movie.advance(movie.steps):
        deepest = max(deepest, len(movie.stack))
    assert deepest <= 8
    assert movie.counters.inspections <= 4 * 8 * n
    assert movie.counters.compares == 0
