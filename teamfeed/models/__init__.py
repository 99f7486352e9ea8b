"""Pydantic models for team feeds."""

from teamfeed.models.event import Event
from teamfeed.models.feed import CachedFeed
from teamfeed.models.preferences import TeamPreferences
from teamfeed.models.session import OAuthSession, TokenResponse
from teamfeed.models.team import Location, Team
from teamfeed.models.token import FilterType, TokenMapping

__all__ = [
    "Event",
    "CachedFeed",
    "TeamPreferences",
    "OAuthSession",
    "TokenResponse",
    "Location",
    "Team",
    "FilterType",
    "TokenMapping",
]
