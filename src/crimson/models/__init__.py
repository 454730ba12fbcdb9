"""Pydantic models and schemas."""

from crimson.models.directory import FlavortownUser, FlavortownUsersResponse, ResolvedIdentity
from crimson.models.payout import (
    FixedRate,
    HelperActivity,
    PayoutPolicy,
    PayoutResult,
    Pool,
    policy_from_options,
)
from crimson.models.report import PayoutLine, PayoutReport
from crimson.models.window import TimeWindow

__all__ = [
    # Directory
    "FlavortownUser",
    "FlavortownUsersResponse",
    "ResolvedIdentity",
    # Payout
    "FixedRate",
    "HelperActivity",
    "PayoutPolicy",
    "PayoutResult",
    "Pool",
    "policy_from_options",
    # Report
    "PayoutLine",
    "PayoutReport",
    # Window
    "TimeWindow",
]
