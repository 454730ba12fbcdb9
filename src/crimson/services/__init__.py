"""Business logic services."""

from crimson.services.payout import allocate, display_amount, distributed_total, order_for_display
from crimson.services.report import PayoutReportService, format_report

__all__ = [
    # Payout
    "allocate",
    "display_amount",
    "distributed_total",
    "order_for_display",
    # Report
    "PayoutReportService",
    "format_report",
]
