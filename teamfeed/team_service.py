"""Calendar listing and team settings for the owner account."""

import logging

from teamfeed.config import FeedConfig
from teamfeed.constants import FILTER_ALL, FILTER_GAMES
from teamfeed.exceptions import AccessDeniedError, TeamFeedError, UpstreamFetchError
from teamfeed.models.preferences import TeamPreferences
from teamfeed.models.team import Team
from teamfeed.storage.feed_cache import FeedCache
from teamfeed.storage.preferences import PreferenceStore
from teamfeed.storage.token_registry import TokenRegistry
from teamfeed.upstream.teamsnap_client import TeamSnapClient

logger = logging.getLogger(__name__)


class TeamCalendarService:
    """Lists a user's team feeds and manages per-team naming settings."""

    def __init__(
        self,
        client: TeamSnapClient,
        registry: TokenRegistry,
        preferences: PreferenceStore,
        cache: FeedCache,
        config: FeedConfig,
    ):
        self.client = client
        self.registry = registry
        self.preferences = preferences
        self.cache = cache
        self.config = config

    def _authorized_user(self) -> dict:
        user = self.client.get_me()
        if not user:
            raise UpstreamFetchError("User data not found")

        email = user.get("email")
        if not self.config.allowed_user_email:
            raise AccessDeniedError(
                "Access denied: ALLOWED_USER_EMAIL environment variable is required"
            )
        if email != self.config.allowed_user_email:
            raise AccessDeniedError(
                f"Access denied: The email '{email}' is not authorized to use this service."
            )
        return user

    def list_calendars(self, base_url: str) -> dict:
        """
        List the owner's active teams with their feed URLs.

        Tokens are (re)issued for every team as a side effect.

        Args:
            base_url: Public origin feed URLs are built on, without trailing slash

        Returns:
            ``{"user": {"email"}, "teams": [...]}`` ready for JSON encoding
        """
        user = self._authorized_user()
        teams = self.client.get_active_teams(str(user.get("id", "")))
        base_url = base_url.rstrip("/")

        return {
            "user": {"email": user.get("email")},
            "teams": [self._team_entry(team, base_url) for team in teams],
        }

    def _team_entry(self, team: Team, base_url: str) -> dict:
        preferences = self.preferences.load(team.id)
        team_name = team.name or ""
        all_token = self.registry.issue(team.id, FILTER_ALL, team_name)
        games_token = self.registry.issue(team.id, FILTER_GAMES, team_name)
        return {
            "id": team.id,
            "name": team.name,
            "customName": preferences.custom_name,
            "removeOpponentNames": preferences.remove_opponent_names,
            "calendars": {
                "all": f"{base_url}/{all_token}.ics",
                "games": f"{base_url}/{games_token}.ics",
            },
        }

    def get_settings(self, team_id: str) -> TeamPreferences:
        return self.preferences.load(team_id)

    def update_settings(
        self,
        team_id: str,
        custom_name: str | None,
        remove_opponent_names: bool | None = None,
    ) -> None:
        """Persist team preferences and drop the team's cached feeds."""
        self.preferences.save(team_id, custom_name, remove_opponent_names)
        self.invalidate(team_id)

    def invalidate(self, team_id: str) -> bool:
        """
        Delete both cached feeds of a team.

        Tokens are derived from the team name, so the name is fetched first.

        Returns:
            False if the team could not be fetched and nothing was deleted
        """
        try:
            team = self.client.get_team(team_id)
        except TeamFeedError as e:
            logger.warning(f"Could not fetch team {team_id} to invalidate feeds: {e}")
            return False
        if team is None:
            logger.warning(f"Team {team_id} not found; cached feeds left in place")
            return False

        team_name = team.name or ""
        for filter_type in (FILTER_ALL, FILTER_GAMES):
            self.cache.delete(self.registry.token_for(team_name, filter_type))
        logger.info(f"Invalidated cached feeds for team {team_id}")
        return True
