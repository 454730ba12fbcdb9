"""
Payout policy models.

A run uses exactly one policy: a fixed number of cookies per ticket, or a pool
of cookies split in proportion to each helper's share of closed tickets.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, ValidationError

from crimson.errors import EmptyPoolDivision, InputValidationError

# helper_id -> tickets closed in the window (helpers with no closures are absent)
HelperActivity = dict[str, int]

# helper_id -> cookies, full precision
PayoutResult = dict[str, float]


def _check_activity(activity: HelperActivity) -> None:
    negative = sorted(h for h, tickets in activity.items() if tickets < 0)
    if negative:
        raise InputValidationError(
            f"Ticket counts must be non-negative (got negative counts for {', '.join(negative)})"
        )


class FixedRate(BaseModel):
    """Pay `rate` cookies for every ticket closed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fixed_rate"] = "fixed_rate"
    rate: PositiveFloat = Field(allow_inf_nan=False, description="Cookies paid per closed ticket")

    def allocate(self, activity: HelperActivity) -> PayoutResult:
        _check_activity(activity)
        return {helper: tickets * self.rate for helper, tickets in activity.items()}

    def describe(self) -> str:
        return f"fixed rate of {self.rate:g} cookies per ticket"


class Pool(BaseModel):
    """Split `total` cookies proportionally to tickets closed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pool"] = "pool"
    total: PositiveFloat = Field(
        allow_inf_nan=False, description="Cookies to distribute across all helpers"
    )

    def allocate(self, activity: HelperActivity) -> PayoutResult:
        """
        Allocate the pool.

        Raises:
            EmptyPoolDivision: no tickets were closed (empty or all-zero activity)
        """
        _check_activity(activity)
        total_tickets = sum(activity.values())
        if total_tickets == 0:
            raise EmptyPoolDivision(self.total)
        return {
            helper: (tickets / total_tickets) * self.total
            for helper, tickets in activity.items()
        }

    def describe(self) -> str:
        return f"pool of {self.total:g} cookies"


PayoutPolicy = Annotated[Union[FixedRate, Pool], Field(discriminator="kind")]


def policy_from_options(rate: float | None = None, pool: float | None = None) -> FixedRate | Pool:
    """
    Build the payout policy from the two mutually exclusive options.

    Raises:
        InputValidationError: both or neither option set, or a non-positive value
    """
    if (rate is None) == (pool is None):
        raise InputValidationError("Exactly one of a fixed rate or a pool total must be given")
    try:
        if rate is not None:
            return FixedRate(rate=rate)
        return Pool(total=pool)
    except ValidationError as e:
        raise InputValidationError(
            f"Invalid payout option: {e.errors()[0]['msg']}"
        ) from e
