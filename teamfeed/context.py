"""Shared application context with lazy-initialized dependencies."""

import logging

import requests

from teamfeed.config import FeedConfig
from teamfeed.constants import FALLBACK_TOKEN_SECRET
from teamfeed.feed_service import FeedService
from teamfeed.output.ics_writer import ICSWriter
from teamfeed.storage.feed_cache import FeedCache
from teamfeed.storage.kv_store import FileStore, KeyValueStore, MemoryStore
from teamfeed.storage.preferences import PreferenceStore
from teamfeed.storage.token_registry import TokenRegistry
from teamfeed.team_service import TeamCalendarService
from teamfeed.upstream.oauth import OAuthTokenManager
from teamfeed.upstream.teamsnap_client import TeamSnapClient

logger = logging.getLogger(__name__)


class AppContext:
    """Wires config, store, TeamSnap access and services together.

    Used by both the Flask app and the CLI. Anything passed in explicitly is
    used as-is; everything else is built on first access.

    Usage:
        ctx = AppContext()
        response = ctx.feed_service.serve(FeedRequest(token=token))
    """

    def __init__(
        self,
        config: FeedConfig | None = None,
        store: KeyValueStore | None = None,
        session: requests.Session | None = None,
        client: TeamSnapClient | None = None,
    ):
        self._config = config
        self._store = store
        self._session = session
        self._client = client

        # Lazy-loaded dependencies
        self._oauth: OAuthTokenManager | None = None
        self._registry: TokenRegistry | None = None
        self._preferences: PreferenceStore | None = None
        self._feed_cache: FeedCache | None = None
        self._writer: ICSWriter | None = None
        self._feed_service: FeedService | None = None
        self._calendar_service: TeamCalendarService | None = None

    @property
    def config(self) -> FeedConfig:
        """Get configuration (lazy-loaded)."""
        if self._config is None:
            self._config = FeedConfig.from_env()
        return self._config

    @property
    def store(self) -> KeyValueStore:
        """Get key-value store for the configured backend (lazy-loaded)."""
        if self._store is None:
            if self.config.store_backend == "memory":
                self._store = MemoryStore()
            else:
                self._store = FileStore(self.config.store_dir)
        return self._store

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    @property
    def oauth(self) -> OAuthTokenManager:
        """Get OAuth token manager (lazy-loaded)."""
        if self._oauth is None:
            self._oauth = OAuthTokenManager(self.store, self.config, self.session)
        return self._oauth

    @property
    def client(self) -> TeamSnapClient:
        """Get TeamSnap client (lazy-loaded)."""
        if self._client is None:
            self._client = TeamSnapClient(self.oauth, self.config, self.session)
        return self._client

    @property
    def registry(self) -> TokenRegistry:
        """Get calendar token registry (lazy-loaded)."""
        if self._registry is None:
            secret = self.config.calendar_token_secret
            if secret == FALLBACK_TOKEN_SECRET:
                logger.warning("No client or token secret configured; calendar tokens use a fallback salt")
            self._registry = TokenRegistry(self.store, secret)
        return self._registry

    @property
    def preferences(self) -> PreferenceStore:
        if self._preferences is None:
            self._preferences = PreferenceStore(self.store)
        return self._preferences

    @property
    def feed_cache(self) -> FeedCache:
        if self._feed_cache is None:
            self._feed_cache = FeedCache(self.store)
        return self._feed_cache

    @property
    def writer(self) -> ICSWriter:
        """Get ICS writer with location enrichment (lazy-loaded)."""
        if self._writer is None:
            self._writer = ICSWriter(
                location_lookup=self.client.location_address,
                default_timezone=self.config.default_timezone,
            )
        return self._writer

    @property
    def feed_service(self) -> FeedService:
        """Get feed service (lazy-loaded)."""
        if self._feed_service is None:
            self._feed_service = FeedService(
                self.registry,
                self.oauth,
                self.client,
                self.preferences,
                self.feed_cache,
                self.writer,
            )
        return self._feed_service

    @property
    def calendar_service(self) -> TeamCalendarService:
        """Get calendar listing and settings service (lazy-loaded)."""
        if self._calendar_service is None:
            self._calendar_service = TeamCalendarService(
                self.client,
                self.registry,
                self.preferences,
                self.feed_cache,
                self.config,
            )
        return self._calendar_service
