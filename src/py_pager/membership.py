"""Membership query shared by every replacement policy.

Each policy keeps its resident pages in whatever container suits it
(a deque for FIFO, an OrderedDict for LRU, a list for OPT).  ``contains``
only needs iteration, so one predicate serves them all.
"""

from collections.abc import Iterable


def contains(value: int, collection: Iterable[int]) -> bool:
    """Return True if *value* occurs in *collection*.

    A linear scan that stops at the first match.  Cost is proportional
    to the collection size, i.e. O(frame_count) for a resident set.
    """
    for item in collection:
        if item == value:
            return True
    return False
