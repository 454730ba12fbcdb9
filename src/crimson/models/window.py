"""
Leaderboard time window.
"""

from datetime import datetime, timedelta, timezone

from pydantic import AwareDatetime, BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from crimson.errors import InputValidationError

PRETTY_FORMAT = "%a {day} %b %Y (@ %H:%M)"


class TimeWindow(BaseModel):
    """
    Half-open interval [start, end) over timezone-aware timestamps.

    A closure exactly at `start` is inside the window, one exactly at `end` is not.
    Both bounds are normalised to UTC.
    """

    model_config = ConfigDict(frozen=True)

    start: AwareDatetime
    end: AwareDatetime

    @field_validator("start", "end", mode="before")
    @classmethod
    def _iso_8601_only(cls, value):
        # Lax datetime parsing would also take Unix epoch strings
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                raise ValueError(f"{value!r} is not an ISO 8601 timestamp") from None
        return value

    @field_validator("start", "end")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self

    @classmethod
    def parse(cls, start: str, end: str) -> "TimeWindow":
        """
        Build a window from ISO-8601 strings, e.g. 2026-02-01T00:00:00Z.

        Raises:
            InputValidationError: unparsable or naive timestamps, or start >= end
        """
        try:
            return cls(start=start, end=end)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'window'}: {err['msg']}"
                for err in e.errors()
            )
            raise InputValidationError(f"Invalid time window ({details})") from e

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, moment: datetime) -> bool:
        """Check whether a timestamp falls inside the window."""
        return self.start <= moment < self.end

    @staticmethod
    def _pretty(moment: datetime) -> str:
        return moment.strftime(PRETTY_FORMAT).format(day=moment.day)

    def describe(self) -> str:
        """Human readable summary, e.g. for the run banner."""
        return (
            f"{self._pretty(self.start)} to {self._pretty(self.end)} "
            f"(Period: {self.duration})"
        )
