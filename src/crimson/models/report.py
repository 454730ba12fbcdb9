"""
Payout report models.
"""

from pydantic import BaseModel, Field

from crimson.models.payout import PayoutPolicy
from crimson.models.window import TimeWindow


class PayoutLine(BaseModel):
    """One helper's row in the payout report."""

    rank: int
    helper_id: str
    display_name: str
    profile_url: str
    reward: float = Field(description="Cookies, full precision")
    display_reward: str = Field(description="Cookies rounded for display")
    tickets_closed: int


class PayoutReport(BaseModel):
    """Complete payout report for one window."""

    window: TimeWindow
    policy: PayoutPolicy
    lines: list[PayoutLine] = Field(description="Helpers in descending reward order")
    total_tickets: int = Field(description="Tickets closed in the window")
    total_distributed: float = Field(description="Sum of unrounded rewards")
    display_total: str
