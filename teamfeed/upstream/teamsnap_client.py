"""TeamSnap REST API client."""

import logging
from typing import Any

import requests
from pydantic import ValidationError

from teamfeed.config import FeedConfig
from teamfeed.exceptions import (
    AuthenticationRequiredError,
    TeamFeedError,
    UpstreamFetchError,
)
from teamfeed.models.team import Location, Team
from teamfeed.upstream.oauth import OAuthTokenManager

logger = logging.getLogger(__name__)


def collection_items(payload: Any) -> list[dict]:
    """
    Flatten a Collection+JSON document into attribute dicts.

    Each ``collection.items[].data`` list of ``{"name", "value"}`` pairs
    becomes one dict. Anything malformed is skipped.
    """
    if not isinstance(payload, dict):
        return []
    collection = payload.get("collection")
    if not isinstance(collection, dict):
        return []
    items = collection.get("items")
    if not isinstance(items, list):
        return []

    records = []
    for item in items:
        if not isinstance(item, dict):
            continue
        record = {}
        for field in item.get("data") or []:
            if isinstance(field, dict) and "name" in field:
                record[field["name"]] = field.get("value")
        records.append(record)
    return records


class TeamSnapClient:
    """Authenticated access to TeamSnap teams, events, locations and users."""

    def __init__(
        self,
        oauth: OAuthTokenManager,
        config: FeedConfig,
        session: requests.Session | None = None,
    ):
        self.oauth = oauth
        self.config = config
        self.session = session or oauth.session

    def _request(self, endpoint: str, access_token: str, params: dict | None):
        try:
            return self.session.get(
                f"{self.config.api_url}{endpoint}",
                params=params,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
                timeout=self.config.http_timeout,
            )
        except requests.RequestException as e:
            raise UpstreamFetchError(f"Request to {endpoint} failed: {e}")

    def get_json(self, endpoint: str, params: dict | None = None) -> Any:
        """
        GET an API endpoint and decode the JSON body.

        A 401 triggers one token refresh and one retry.

        Raises:
            AuthenticationRequiredError: If no usable token is available
            UpstreamFetchError: On network errors, non-2xx status or bad JSON
        """
        access_token = self.oauth.get_valid_access_token()
        if not access_token:
            raise AuthenticationRequiredError("Calendar access expired. Please re-authenticate.")

        response = self._request(endpoint, access_token, params)
        if response.status_code == 401:
            logger.info("Token expired, attempting refresh...")
            tokens = self.oauth.refresh()
            if tokens is None:
                raise AuthenticationRequiredError(
                    "Calendar access expired. Please re-authenticate."
                )
            response = self._request(endpoint, tokens.access_token, params)

        if not response.ok:
            logger.error(f"TeamSnap API error for {endpoint}: {response.status_code} {response.text}")
            raise UpstreamFetchError(
                f"Error fetching {endpoint}: {response.status_code} {response.text}",
                status=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFetchError(f"Invalid JSON from {endpoint}: {e}")

    def get_team(self, team_id: str) -> Team | None:
        items = collection_items(self.get_json(f"/teams/{team_id}"))
        if not items:
            return None
        try:
            return Team.model_validate(items[0])
        except ValidationError:
            return None

    def search_events(self, team_id: str) -> list[dict]:
        """Raw attribute dicts for every event of a team."""
        return collection_items(self.get_json("/events/search", {"team_id": team_id}))

    def get_location(self, location_id: str) -> Location | None:
        items = collection_items(self.get_json(f"/locations/{location_id}"))
        if not items:
            return None
        return Location.model_validate(items[0])

    def get_me(self) -> dict | None:
        """Attributes of the authenticated user."""
        items = collection_items(self.get_json("/me"))
        return items[0] if items else None

    def get_active_teams(self, user_id: str) -> list[Team]:
        teams = []
        for item in collection_items(self.get_json("/teams/active", {"user_id": user_id})):
            try:
                teams.append(Team.model_validate(item))
            except ValidationError:
                logger.warning(f"Skipping team record without an id: {item}")
        return teams

    def team_name(self, team_id: str) -> str | None:
        """Upstream team name, or None if it cannot be fetched."""
        try:
            team = self.get_team(team_id)
        except TeamFeedError as e:
            logger.warning(f"Could not fetch team name for team {team_id}: {e}")
            return None
        return team.name if team else None

    def location_address(self, location_id: str) -> str | None:
        """Formatted street address of a location, or None if unavailable."""
        try:
            location = self.get_location(location_id)
        except (TeamFeedError, ValidationError) as e:
            logger.warning(f"Could not fetch location data for location {location_id}: {e}")
            return None
        return location.formatted_address if location else None
