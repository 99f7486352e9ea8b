"""Rendered feed cache."""

import logging

from teamfeed.constants import FEED_CACHE_TTL, FEED_KEY_PREFIX, FEED_LASTUPDATE_SUFFIX
from teamfeed.models.feed import CachedFeed
from teamfeed.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class FeedCache:
    """Stores a rendered feed body and its watermark as a key pair."""

    def __init__(self, store: KeyValueStore, ttl: int = FEED_CACHE_TTL):
        self.store = store
        self.ttl = ttl

    def _keys(self, token: str) -> tuple[str, str]:
        body_key = f"{FEED_KEY_PREFIX}{token}"
        return body_key, f"{body_key}{FEED_LASTUPDATE_SUFFIX}"

    def get(self, token: str) -> CachedFeed | None:
        """Return the cached feed, or None if either half is missing or bad."""
        body_key, update_key = self._keys(token)
        body = self.store.get(body_key)
        last_update = self.store.get(update_key)
        if not body or not last_update:
            return None
        try:
            watermark = int(last_update)
        except ValueError:
            logger.warning(f"Ignoring unparseable cache watermark for {token}: {last_update!r}")
            return None
        return CachedFeed(ics_body=body, last_update=watermark)

    def put(self, token: str, feed: CachedFeed) -> None:
        body_key, update_key = self._keys(token)
        self.store.put(body_key, feed.ics_body, ttl=self.ttl)
        self.store.put(update_key, str(feed.last_update), ttl=self.ttl)

    def delete(self, token: str) -> None:
        for key in self._keys(token):
            self.store.delete(key)
