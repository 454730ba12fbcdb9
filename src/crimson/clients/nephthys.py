"""
Nephthys ticket database client.

Counts ticket closures per helper inside a time window. Uses SQLAlchemy Core so
any database holding the "User"/"Ticket" tables works (PostgreSQL in
production, SQLite in tests).
"""

import logging
from typing import Any

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Engine,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    desc,
    func,
    select,
)
from sqlalchemy.exc import SQLAlchemyError

from crimson.config import Settings
from crimson.errors import QueryError, StoreUnavailable
from crimson.models.payout import HelperActivity
from crimson.models.window import TimeWindow

logger = logging.getLogger(__name__)

metadata = MetaData()

users_table = Table(
    "User",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("slackId", String, nullable=False, unique=True),
    Column("helper", Boolean, nullable=False, default=False),
)

tickets_table = Table(
    "Ticket",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("closedById", Integer, ForeignKey("User.id"), nullable=True),
    Column("closedAt", DateTime(timezone=True), nullable=True),
)


def helper_leaderboard_query(window: TimeWindow):
    """
    Build the leaderboard SELECT for a window.

    Only helpers count, and only closures with start <= closedAt < end.
    """
    tickets_closed = func.count().label("tickets_closed")
    return (
        select(users_table.c.slackId.label("slack_id"), tickets_closed)
        .select_from(
            tickets_table.join(users_table, users_table.c.id == tickets_table.c.closedById)
        )
        .where(
            users_table.c.helper.is_(True),
            tickets_table.c.closedAt >= window.start,
            tickets_table.c.closedAt < window.end,
        )
        .group_by(users_table.c.slackId)
        .order_by(desc(tickets_closed))
    )


class HelperLeaderboard:
    """
    Ticket-closure leaderboard backed by the Nephthys database.

    Usage:
        with HelperLeaderboard.from_settings(settings) as leaderboard:
            activity = leaderboard.fetch(window)
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "HelperLeaderboard":
        """Create an engine for the configured database URL."""
        connect_args: dict[str, Any] = {}
        if settings.database_url.startswith("postgres"):
            connect_args["connect_timeout"] = settings.database_connect_timeout
        try:
            engine = create_engine(
                settings.database_url,
                echo=settings.debug,
                connect_args=connect_args,
            )
        except (SQLAlchemyError, ImportError, ValueError) as e:
            raise StoreUnavailable(f"Failed to set up Nephthys database connection: {e}") from e
        return cls(engine)

    def __enter__(self) -> "HelperLeaderboard":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    def ensure_schema(self) -> None:
        """Create the User and Ticket tables if they do not exist."""
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Failed to create Nephthys tables: {e}") from e

    def fetch(self, window: TimeWindow) -> HelperActivity:
        """
        Count ticket closures per helper inside the window.

        Args:
            window: Half-open [start, end) window

        Returns:
            Dict mapping helper Slack ID to tickets closed. Helpers without any
            closures in the window are absent.

        Raises:
            StoreUnavailable: the database could not be reached
            QueryError: invalid window or a failing query
        """
        if not isinstance(window, TimeWindow) or window.start >= window.end:
            raise QueryError(f"Invalid leaderboard window: {window!r}")

        try:
            connection = self.engine.connect()
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Failed to connect to Nephthys database: {e}") from e

        with connection:
            logger.debug("Querying helper leaderboard for %s", window.describe())
            try:
                rows = connection.execute(helper_leaderboard_query(window)).all()
            except SQLAlchemyError as e:
                raise QueryError(f"Helper leaderboard query failed: {e}") from e

        activity: HelperActivity = {row.slack_id: int(row.tickets_closed) for row in rows}
        logger.info(
            "Leaderboard has %d helper(s) with %d ticket(s) closed",
            len(activity),
            sum(activity.values()),
        )
        return activity
