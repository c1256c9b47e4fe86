"""
Shuffle step: folds per-chunk word counts into one aggregate.
"""

from typing import Dict

FrequencyMap = Dict[str, int]


def merge(aggregate: FrequencyMap, partial: FrequencyMap) -> FrequencyMap:
    """
    Add every count in partial to aggregate, in place

    Addition is commutative and associative, so the order in which
    partial maps arrive does not change the final aggregate.

    Args:
        aggregate: Running totals, mutated
        partial: Counts from a single chunk, left untouched

    Returns:
        The aggregate, for chaining
    """
    for word, count in partial.items():
        aggregate[word] = aggregate.get(word, 0) + count
    return aggregate
