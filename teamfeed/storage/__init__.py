"""Storage layer for tokens, preferences and cached feeds."""

from teamfeed.storage.feed_cache import FeedCache
from teamfeed.storage.kv_store import FileStore, KeyValueStore, MemoryStore
from teamfeed.storage.preferences import PreferenceStore
from teamfeed.storage.token_registry import TokenRegistry, derive_token

__all__ = [
    "FeedCache",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "PreferenceStore",
    "TokenRegistry",
    "derive_token",
]
