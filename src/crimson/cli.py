"""
Crimson CLI

Command-line interface for paying helpers cookies for the tickets they closed.
"""

import argparse
import sys

import httpx

from crimson.clients.flavortown import FlavortownClient, UserResolver
from crimson.clients.nephthys import HelperLeaderboard
from crimson.config import Settings, load_settings
from crimson.errors import CrimsonError
from crimson.logger import setup_logger
from crimson.models.payout import PayoutPolicy, policy_from_options
from crimson.models.report import PayoutReport
from crimson.models.window import TimeWindow
from crimson.services.report import PayoutReportService, format_report


class CrimsonPayouts:
    """
    Runs helper payouts against Nephthys and Flavortown.

    Can be used as a library or via CLI.

    Example:
        with CrimsonPayouts(load_settings()) as crimson:
            window = TimeWindow.parse("2026-02-01T00:00:00Z", "2026-03-01T00:00:00Z")
            report = crimson.payout(window, Pool(total=1000))
    """

    def __init__(
        self,
        settings: Settings,
        leaderboard: HelperLeaderboard | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings
        self.leaderboard = leaderboard
        self.transport = transport
        self.client: FlavortownClient | None = None

    def __enter__(self):
        if self.leaderboard is None:
            self.leaderboard = HelperLeaderboard.from_settings(self.settings)
        self.client = FlavortownClient(self.settings, transport=self.transport)
        self.client.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            self.client.__exit__(exc_type, exc_val, exc_tb)
        if self.leaderboard:
            self.leaderboard.close()

    def payout(self, window: TimeWindow, policy: PayoutPolicy) -> PayoutReport:
        """Fetch the leaderboard for a window and build the payout report."""
        if not self.client or not self.leaderboard:
            raise RuntimeError("Not initialized. Use 'with CrimsonPayouts(...)' context.")

        activity = self.leaderboard.fetch(window)
        resolver = UserResolver(self.client, self.settings.flavortown_site_root)
        return PayoutReportService(resolver).build(window, policy, activity)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crimson",
        description="Pay helpers cookies for closing tickets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Pay 2.5 cookies per ticket closed in February
  crimson payout --start 2026-02-01T00:00:00Z --end 2026-03-01T00:00:00Z --rate 2.5

  # Split 1000 cookies across February's helpers
  crimson payout --start 2026-02-01T00:00:00Z --end 2026-03-01T00:00:00Z --pool 1000
        """,
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # payout command
    payout_parser = subparsers.add_parser("payout", help="Compute helper payouts")
    payout_parser.add_argument(
        "--start", required=True, help="Start time (ISO 8601, e.g. 2026-02-01T00:00:00Z)"
    )
    payout_parser.add_argument(
        "--end", required=True, help="End time (ISO 8601, e.g. 2026-03-01T00:00:00Z)"
    )
    mode = payout_parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--rate", type=float, help="Cookies per ticket closed")
    mode.add_argument("--pool", type=float, help="Total cookies split by share of tickets")
    payout_parser.add_argument(
        "--json", action="store_true", help="Print the report as JSON"
    )

    return parser


def run_payout(args: argparse.Namespace, settings: Settings, **components) -> PayoutReport:
    """Validate input, then run the payout and print the report."""
    window = TimeWindow.parse(args.start, args.end)
    policy = policy_from_options(rate=args.rate, pool=args.pool)

    if not args.json:
        print(f"📊 Selecting leaderboard from {window.describe()}")
        print(f"   Paying out a {policy.describe()}\n")

    with CrimsonPayouts(settings, **components) as crimson:
        report = crimson.payout(window, policy)

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(format_report(report))
    return report


def cli_main(argv: list[str] | None = None, settings: Settings | None = None, **components) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = settings or load_settings()
        logger = setup_logger("crimson", debug=args.debug or settings.debug)
        if not settings.api_base_has_expected_path:
            logger.warning(
                "FLAVORTOWN_API_BASE does not end in `/api/v1`. "
                "Are you sure you have the full URL?"
            )

        if args.command == "payout":
            run_payout(args, settings, **components)
    except CrimsonError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    return 0


def run_cli():
    """Entry point for CLI."""
    sys.exit(cli_main())


if __name__ == "__main__":
    run_cli()
