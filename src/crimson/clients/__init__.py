"""External data sources: the ticket database and the user directory."""

from crimson.clients.flavortown import FlavortownClient, UserResolver
from crimson.clients.nephthys import HelperLeaderboard

__all__ = ["FlavortownClient", "HelperLeaderboard", "UserResolver"]
