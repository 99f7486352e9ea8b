"""Feed generation with cache reuse and conditional responses."""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from enum import Enum

from teamfeed.constants import CACHE_CONTROL
from teamfeed.exceptions import AuthenticationRequiredError, InvalidTokenError
from teamfeed.models.feed import CachedFeed
from teamfeed.models.token import TokenMapping
from teamfeed.output.ics_writer import ICSWriter
from teamfeed.processing.event_filter import (
    EventFetcher,
    filter_events,
    latest_update_timestamp,
)
from teamfeed.storage.feed_cache import FeedCache
from teamfeed.storage.preferences import PreferenceStore
from teamfeed.storage.token_registry import TokenRegistry
from teamfeed.upstream.oauth import OAuthTokenManager
from teamfeed.upstream.teamsnap_client import TeamSnapClient

logger = logging.getLogger(__name__)


class FeedState(str, Enum):
    """Cache state a full response was produced in."""

    NO_CACHE = "NO_CACHE"
    CACHE_FRESH = "CACHE_FRESH"
    CACHE_STALE = "CACHE_STALE"


@dataclass
class FeedRequest:
    """Inputs of one feed request."""

    token: str
    if_modified_since: str | None = None
    if_none_match: str | None = None
    cache_off: bool = False
    refresh: bool = False
    as_text: bool = False


@dataclass
class FeedResponse:
    """HTTP-shaped result of serving a feed."""

    status: int
    body: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    state: FeedState | None = None


def _now_millis() -> int:
    return int(time.time() * 1000)


def freshness_headers(token: str, watermark: int) -> dict[str, str]:
    """Last-Modified, ETag and Cache-Control for a feed watermark."""
    last_modified = datetime.fromtimestamp(watermark / 1000, tz=timezone.utc)
    return {
        "Last-Modified": format_datetime(last_modified, usegmt=True),
        "ETag": f'"{token}-{watermark}"',
        "Cache-Control": CACHE_CONTROL,
    }


def content_headers(mapping: TokenMapping, as_text: bool) -> dict[str, str]:
    if as_text:
        return {
            "Content-Type": "text/plain; charset=utf-8",
            "Content-Disposition": "inline",
            "X-Content-Type-Options": "nosniff",
        }
    return {
        "Content-Type": "text/calendar; charset=utf-8",
        "Content-Disposition": (
            f'attachment; filename="{mapping.team_id}_{mapping.filter_type}.ics"'
        ),
    }


def not_modified_since(watermark: int, if_modified_since: str | None) -> bool:
    """True if the client's If-Modified-Since date covers the watermark.

    HTTP dates have second precision, so the watermark is compared in whole
    seconds. Unparseable dates never match.
    """
    if not if_modified_since:
        return False
    try:
        since = parsedate_to_datetime(if_modified_since)
    except (TypeError, ValueError):
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    return watermark // 1000 <= int(since.timestamp())


def etag_matches(etag: str, if_none_match: str | None) -> bool:
    if not if_none_match:
        return False
    candidates = [tag.strip() for tag in if_none_match.split(",")]
    candidates = [tag[2:] if tag.startswith("W/") else tag for tag in candidates]
    return "*" in candidates or etag in candidates


class FeedService:
    """Serves feeds for calendar tokens.

    A cached feed is reused while no filtered event has an ``updated_at``
    newer than the cached watermark; otherwise the feed is re-rendered and
    the cache rewritten.
    """

    def __init__(
        self,
        registry: TokenRegistry,
        oauth: OAuthTokenManager,
        client: TeamSnapClient,
        preferences: PreferenceStore,
        cache: FeedCache,
        writer: ICSWriter,
        clock=_now_millis,
    ):
        self.registry = registry
        self.oauth = oauth
        self.client = client
        self.fetcher = EventFetcher(client)
        self.preferences = preferences
        self.cache = cache
        self.writer = writer
        self._clock = clock

    def serve(self, request: FeedRequest) -> FeedResponse:
        """
        Produce the response for a feed request.

        Raises:
            InvalidTokenError: If the token does not resolve
            AuthenticationRequiredError: If no access token can be obtained
            UpstreamFetchError: If the events request fails
        """
        token = request.token
        logger.info(f"Serving calendar for token: {token}")

        mapping = self.registry.resolve(token)
        if mapping is None:
            logger.warning(f"Unknown calendar token: {token}")
            raise InvalidTokenError("Invalid or expired calendar token.")

        bypass = request.cache_off or request.refresh
        if request.cache_off:
            logger.info("Cache bypass enabled - skipping cache check")
        cached = None if bypass else self.cache.get(token)
        if request.refresh:
            logger.info("Force refresh enabled - clearing cache")
            self.cache.delete(token)

        if cached is not None:
            headers = freshness_headers(token, cached.last_update)
            if not_modified_since(
                cached.last_update, request.if_modified_since
            ) or etag_matches(headers["ETag"], request.if_none_match):
                logger.info(f"Calendar {token} not modified")
                return FeedResponse(status=304, headers=headers)

        if not self.oauth.get_valid_access_token():
            raise AuthenticationRequiredError("Calendar access expired. Please re-authenticate.")

        events = filter_events(
            self.fetcher.fetch_team_events(mapping.team_id), mapping.filter_type
        )
        watermark = latest_update_timestamp(events)

        if cached is not None and watermark <= cached.last_update:
            logger.info(f"Serving cached calendar for {token}")
            headers = freshness_headers(token, cached.last_update)
            headers.update(content_headers(mapping, request.as_text))
            return FeedResponse(
                status=200,
                body=cached.ics_body,
                headers=headers,
                state=FeedState.CACHE_FRESH,
            )

        state = FeedState.NO_CACHE if cached is None else FeedState.CACHE_STALE
        body = self.writer.render(
            mapping.team_id,
            events,
            self.preferences.load(mapping.team_id),
            self.client.team_name(mapping.team_id),
        )
        logger.info(f"Generated calendar for {token} from {len(events)} events ({state.value})")

        if watermark > 0:
            self.cache.put(token, CachedFeed(ics_body=body, last_update=watermark))

        headers = freshness_headers(token, watermark or self._clock())
        headers.update(content_headers(mapping, request.as_text))
        return FeedResponse(status=200, body=body, headers=headers, state=state)
