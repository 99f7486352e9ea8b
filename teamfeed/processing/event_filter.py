"""Event retrieval and filtering."""

import logging

from teamfeed.constants import FILTER_GAMES
from teamfeed.models.event import Event
from teamfeed.upstream.teamsnap_client import TeamSnapClient

logger = logging.getLogger(__name__)


class EventFetcher:
    """Fetches a team's events from TeamSnap."""

    def __init__(self, client: TeamSnapClient):
        self.client = client

    def fetch_team_events(self, team_id: str) -> list[Event]:
        """
        Retrieve every event for a team in upstream order.

        Raises:
            UpstreamFetchError: If the events request fails
            AuthenticationRequiredError: If no access token is available
        """
        records = self.client.search_events(team_id)
        if not records:
            logger.info(f"No events found for team: {team_id}")
        return [Event.from_data(record) for record in records]


def drop_cancelled(events: list[Event]) -> list[Event]:
    return [event for event in events if not event.is_canceled]


def apply_filter(events: list[Event], filter_type: str) -> list[Event]:
    """Keep only games for the "games" filter; any other filter is a no-op."""
    if filter_type == FILTER_GAMES:
        return [event for event in events if event.is_game_like]
    return list(events)


def filter_events(events: list[Event], filter_type: str) -> list[Event]:
    """Drop cancelled events, then apply the feed filter."""
    return apply_filter(drop_cancelled(events), filter_type)


def latest_update_timestamp(events: list[Event]) -> int:
    """Maximum updated_at across events in epoch milliseconds, 0 if none."""
    stamps = [e.updated_at_millis for e in events if e.updated_at_millis is not None]
    return max(stamps, default=0)
