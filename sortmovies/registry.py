from .heapsort import HeapSortMovie, RepeatedHeapSortMovie
from .mergesort import MergeSortMovie
from .quicksort import PrephaseQuickSortMovie, QuickSortMovie
from .radix import InPlaceRadixMovie, RadixMergeMovie
from .rotate import TrinityRotateMovie
from .tournament import TournamentSortMovie

ALGORITHMS = [
    ("Quick Sort",               "quick"),
    ("Quick Sort (heap prephase)", "quick_prephase"),
    ("Merge Sort",               "merge"),
    ("Heap Sort",                "heap"),
    ("Repeated Heap Sort",       "repeat_heap"),
    ("In-place MSD Radix Sort",  "radix_inplace"),
    ("MSD Radix Merge",          "radix_merge"),
    ("Tournament Sort",          "tournament"),
    ("Trinity Rotation",         "rotate"),
]

SORT_KEYS = [key for _, key in ALGORITHMS if key != "rotate"]


def get_movie(key, data, name, tone=None, places=None):
    builtins = {
        "quick":          lambda: QuickSortMovie(name, data, tone),
        "quick_prephase": lambda: PrephaseQuickSortMovie(name, data, tone),
        "merge":          lambda: MergeSortMovie(name, data, tone),
        "heap":           lambda: HeapSortMovie(name, data, tone),
        "repeat_heap":    lambda: RepeatedHeapSortMovie(name, data, tone),
        "radix_inplace":  lambda: InPlaceRadixMovie(name, data, tone),
        "radix_merge":    lambda: RadixMergeMovie(name, data, tone),
        "tournament":     lambda: TournamentSortMovie(name, data, tone),
        "rotate":         lambda: TrinityRotateMovie(
            name, data, len(data) // 4 if places is None else places, tone),
    }
    if key in builtins: return builtins[key]()
    raise KeyError(f"Unknown key: {key}")
