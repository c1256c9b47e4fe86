"""
Reduce step: selects the most frequent words from the aggregate counts.
"""

import heapq
from typing import Dict, List, Tuple

RankedEntry = Tuple[str, int]


def _rank_key(entry: RankedEntry):
    # Count descending, then word ascending for equal counts
    word, count = entry
    return (-count, word)


def top_k(aggregate: Dict[str, int], k: int) -> List[RankedEntry]:
    """
    Return the k most frequent (word, count) pairs

    Args:
        aggregate: Word counts for the whole input
        k: Maximum number of entries to return

    Returns:
        At most k entries sorted by count descending. Words with equal
        counts are ordered lexicographically, so the result is deterministic.
        If k exceeds the vocabulary every word is returned once.

    Raises:
        ValueError: If k is negative
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    if k == 0 or not aggregate:
        return []
    if k >= len(aggregate):
        return sorted(aggregate.items(), key=_rank_key)
    return heapq.nsmallest(k, aggregate.items(), key=_rank_key)
