"""
Exceptions raised by the payout pipeline.

Every failure is fatal for the run; nothing here is retried.
"""


class CrimsonError(Exception):
    """Base exception for payout run failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(CrimsonError):
    """Missing or malformed environment settings."""


class InputValidationError(CrimsonError):
    """Bad time window or payout mode selection."""


class StoreUnavailable(CrimsonError):
    """The ticket database could not be reached."""


class QueryError(CrimsonError):
    """The leaderboard query failed or was given an invalid window."""


class EmptyPoolDivision(CrimsonError):
    """Pool payout requested for a window with no closed tickets."""

    def __init__(self, total: float):
        self.total = total
        super().__init__(
            f"Cannot split a pool of {total} cookies: no tickets were closed in this window"
        )


class DirectoryUnavailable(CrimsonError):
    """Transport or HTTP-level failure talking to the user directory."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class NoMatchFound(CrimsonError):
    """The user directory returned no users for a helper."""

    def __init__(self, helper_id: str):
        self.helper_id = helper_id
        super().__init__(f"Flavortown API returned no users for helper {helper_id}")
