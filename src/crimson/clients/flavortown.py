"""
Flavortown API Client

Looks up users in the Flavortown user directory. Uses a blocking httpx client;
lookups happen one at a time.
"""

import logging

import httpx
from pydantic import ValidationError

from crimson.config import Settings, get_settings
from crimson.errors import DirectoryUnavailable, NoMatchFound
from crimson.models.directory import FlavortownUser, FlavortownUsersResponse, ResolvedIdentity

logger = logging.getLogger(__name__)


class FlavortownClient:
    """
    Client for the Flavortown API.

    Usage:
        with FlavortownClient(settings) as client:
            users = client.get_users("U073M5L9U13")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> "FlavortownClient":
        """Create HTTP client on context entry."""
        # Trailing slash so relative paths join under /api/v1 rather than replacing it
        base_url = self.settings.flavortown_api_base.rstrip("/") + "/"
        self._client = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(self.settings.flavortown_timeout),
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {self.settings.flavortown_api_key}",
            },
            transport=self._transport,
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close HTTP client on context exit."""
        if self._client:
            self._client.close()
            self._client = None

    @property
    def client(self) -> httpx.Client:
        """Get the HTTP client, raising if not initialized."""
        if self._client is None:
            raise RuntimeError(
                "FlavortownClient must be used as a context manager: "
                "with FlavortownClient() as client: ..."
            )
        return self._client

    def get_users(self, query: str) -> list[FlavortownUser]:
        """
        Search users by query string (Slack ID, name, ...).

        Args:
            query: Search term

        Returns:
            Users in the order the API returned them

        Raises:
            DirectoryUnavailable: transport failure, error status or bad payload
        """
        logger.debug("Fetching users from Flavortown API: users?query=%s", query)
        try:
            response = self.client.get("users", params={"query": query})
        except httpx.HTTPError as e:
            raise DirectoryUnavailable(f"Failed to fetch users from Flavortown API: {e}") from e

        if not response.is_success:
            raise DirectoryUnavailable(
                f"Flavortown API returned error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        try:
            data = FlavortownUsersResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise DirectoryUnavailable(
                f"Invalid users response from Flavortown API: {e}",
                status_code=response.status_code,
            ) from e

        return data.users


class UserResolver:
    """Maps helper Slack IDs to Flavortown identities."""

    def __init__(self, client: FlavortownClient, site_root: str):
        self.client = client
        self.site_root = site_root.rstrip("/")

    def profile_url(self, user: FlavortownUser) -> str:
        return f"{self.site_root}/users/{user.id}"

    def resolve(self, helper_id: str) -> ResolvedIdentity:
        """
        Resolve a helper to a display identity.

        When the directory returns several users, the first one wins.

        Raises:
            NoMatchFound: the directory knows no such user
            DirectoryUnavailable: the directory could not be queried
        """
        users = self.client.get_users(helper_id)
        if not users:
            raise NoMatchFound(helper_id)
        if len(users) > 1:
            logger.warning(
                "Flavortown API returned %d users for %s, using the first (id=%s)",
                len(users),
                helper_id,
                users[0].id,
            )

        user = users[0]
        return ResolvedIdentity(
            helper_id=helper_id,
            display_name=user.display_name,
            profile_url=self.profile_url(user),
            directory_numeric_id=user.id,
            avatar=user.avatar,
            cookies=user.cookies,
        )
