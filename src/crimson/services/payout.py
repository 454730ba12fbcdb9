"""
Payout allocation helpers.

Rewards are computed and compared at full double precision; only the text shown
to people is rounded, at single precision, to hide noise like 12.000000000000002.
"""

import math

import numpy as np

from crimson.models.payout import HelperActivity, PayoutPolicy, PayoutResult

FLOAT32_EXACT_INTEGER_LIMIT = 2**24


def allocate(policy: PayoutPolicy, activity: HelperActivity) -> PayoutResult:
    """
    Compute each helper's cookies under the given policy.

    Args:
        policy: FixedRate or Pool
        activity: Tickets closed per helper

    Returns:
        Dict with exactly the helpers of `activity` mapped to their reward
    """
    return policy.allocate(activity)


def order_for_display(result: PayoutResult) -> list[tuple[str, float]]:
    """Sort by reward descending, ties broken by ascending helper ID."""
    return sorted(result.items(), key=lambda item: (-item[1], item[0]))


def distributed_total(result: PayoutResult) -> float:
    """Sum of full-precision rewards."""
    return math.fsum(result.values())


def display_amount(value: float) -> str:
    """
    Render a cookie amount at single precision, e.g. 12.0 or 33.333332.

    From 2**24 on, float32 can no longer hold every whole number, so larger
    amounts are rendered at double precision instead.
    """
    if abs(value) >= FLOAT32_EXACT_INTEGER_LIMIT:
        return np.format_float_positional(np.float64(value), trim="0")
    return np.format_float_positional(np.float32(value), trim="0")
