"""Index-based binary search used by ``Datasource.binary_search``."""

from __future__ import annotations

from typing import Callable


def insertion_point(count: int, compare_at: Callable[[int], int]) -> int:
    """Return the leftmost index at which a target keeps ``[0, count)`` sorted.

    ``compare_at(index)`` compares the target with the item at ``index``:
    negative if the target sorts before it, zero if equal, positive after.
    """

    low, high = 0, count
    while low < high:
        middle = (low + high) // 2
        if compare_at(middle) > 0:
            low = middle + 1
        else:
            high = middle
    return low


__all__ = ["insertion_point"]
