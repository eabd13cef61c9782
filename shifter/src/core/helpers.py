#!/usr/bin/env python3
"""
Helpers for jittered sleeps and zone distribution arithmetic
"""

import random
from typing import Optional, Sequence, Tuple

from .exceptions import EmptyDistributionError

JITTER_RATIO = 0.25

_rng = random.Random()


def apply_jitter(value: int, rng: Optional[random.Random] = None) -> int:
    """
    Randomize a duration around its base value

    Args:
        value: Base duration in seconds
        rng: Random source, defaults to a module level generator

    Returns:
        A value in [value - 25%, value + 25%)
    """
    deviation = int(JITTER_RATIO * value)
    if deviation <= 0:
        return value
    rng = rng or _rng
    return value - deviation + rng.randrange(2 * deviation)


def find_min_and_max(values: Sequence[int]) -> Tuple[int, int]:
    """Smallest and largest per-zone node count"""
    if not values:
        raise EmptyDistributionError("Cannot find min and max of an empty zone distribution")
    return min(values), max(values)


def sum_counts(values: Sequence[int]) -> int:
    """Total node count of a zone distribution, 0 when empty"""
    return sum(values)
