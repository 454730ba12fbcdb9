"""
Flavortown user directory models.
"""

from pydantic import BaseModel, Field


class FlavortownUser(BaseModel):
    """A user record as returned by the Flavortown API."""

    id: int
    slack_id: str | None = None
    display_name: str
    avatar: str | None = None
    project_ids: list[int] = Field(default_factory=list)
    cookies: int | None = None


class FlavortownUsersResponse(BaseModel):
    """Response body of GET /users."""

    users: list[FlavortownUser]


class ResolvedIdentity(BaseModel):
    """Display identity of a helper."""

    helper_id: str = Field(description="Slack ID used as the helper key")
    display_name: str
    profile_url: str
    directory_numeric_id: int = Field(description="Flavortown user id")
    avatar: str | None = None
    cookies: int | None = Field(
        default=None, description="Current cookie balance, if the API exposes it"
    )
