"""
Payout Report Service

Turns helper activity into a fully resolved, display-ordered payout report.
"""

import logging

from crimson.clients.flavortown import UserResolver
from crimson.models.payout import HelperActivity, PayoutPolicy
from crimson.models.report import PayoutLine, PayoutReport
from crimson.models.window import TimeWindow
from crimson.services.payout import allocate, display_amount, distributed_total, order_for_display

logger = logging.getLogger(__name__)


class PayoutReportService:
    """
    Service for building payout reports.

    Every helper is resolved before the report is returned, so a failed lookup
    means no report at all.
    """

    def __init__(self, resolver: UserResolver):
        self.resolver = resolver

    def build(
        self, window: TimeWindow, policy: PayoutPolicy, activity: HelperActivity
    ) -> PayoutReport:
        """
        Allocate cookies and resolve every helper.

        Args:
            window: Window the activity was counted in
            policy: Payout policy for this run
            activity: Tickets closed per helper

        Returns:
            PayoutReport with lines in descending reward order

        Raises:
            EmptyPoolDivision: pool policy with no tickets closed
            NoMatchFound, DirectoryUnavailable: a helper could not be resolved
        """
        result = allocate(policy, activity)

        lines: list[PayoutLine] = []
        for rank, (helper_id, reward) in enumerate(order_for_display(result), 1):
            identity = self.resolver.resolve(helper_id)
            logger.debug("Resolved %s to %s", helper_id, identity.display_name)
            lines.append(
                PayoutLine(
                    rank=rank,
                    helper_id=helper_id,
                    display_name=identity.display_name,
                    profile_url=identity.profile_url,
                    reward=reward,
                    display_reward=display_amount(reward),
                    tickets_closed=activity[helper_id],
                )
            )

        total = distributed_total(result)
        return PayoutReport(
            window=window,
            policy=policy,
            lines=lines,
            total_tickets=sum(activity.values()),
            total_distributed=total,
            display_total=display_amount(total),
        )


def format_report(report: PayoutReport) -> str:
    """Render a report as a console table."""
    out = [
        f"{'Rank':<5} {'Helper':<25} {'Cookies':<12} {'Tickets':<8} {'Profile'}",
        "-" * 80,
    ]
    for line in report.lines:
        out.append(
            f"{line.rank:<5} {line.display_name:<25} {line.display_reward:<12} "
            f"{line.tickets_closed:<8} {line.profile_url}"
        )
    if not report.lines:
        out.append("No helpers closed tickets in this window.")
    out.append("")
    out.append(f"Total tickets closed: {report.total_tickets}")
    out.append(f"Total cookies distributed: {report.display_total}")
    return "\n".join(out)
