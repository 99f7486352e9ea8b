"""Single-owner OAuth token lifecycle."""

import json
import logging
import time
from urllib.parse import urlencode

import requests
from pydantic import ValidationError

from teamfeed.config import FeedConfig
from teamfeed.constants import (
    OAUTH_ACCESS_TOKEN_KEY,
    OAUTH_EXPIRES_AT_KEY,
    OAUTH_REFRESH_TOKEN_KEY,
    OAUTH_USER_INFO_KEY,
)
from teamfeed.exceptions import AuthenticationRequiredError
from teamfeed.models.session import OAuthSession, TokenResponse
from teamfeed.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


def _now_millis() -> int:
    return int(time.time() * 1000)


class OAuthTokenManager:
    """Owns the stored access/refresh token pair for the owner account.

    All token reads and writes go through this class. Refresh is attempted at
    most once per call and never looped.
    """

    def __init__(
        self,
        store: KeyValueStore,
        config: FeedConfig,
        session: requests.Session | None = None,
        clock=_now_millis,
    ):
        self.store = store
        self.config = config
        self.session = session or requests.Session()
        self._clock = clock

    def load_session(self) -> OAuthSession:
        """Read the stored OAuth state."""
        expires_at = self.store.get(OAUTH_EXPIRES_AT_KEY)
        user_info = self.store.get(OAUTH_USER_INFO_KEY)
        try:
            expires_at_ms = int(expires_at) if expires_at else None
        except ValueError:
            expires_at_ms = None
        try:
            user = json.loads(user_info) if user_info else None
        except json.JSONDecodeError:
            user = None
        return OAuthSession(
            access_token=self.store.get(OAUTH_ACCESS_TOKEN_KEY),
            refresh_token=self.store.get(OAUTH_REFRESH_TOKEN_KEY),
            expires_at=expires_at_ms,
            user_info=user if isinstance(user, dict) else None,
        )

    def get_valid_access_token(self) -> str | None:
        """Return the stored access token, refreshing once if it has expired out of the store."""
        access_token = self.store.get(OAUTH_ACCESS_TOKEN_KEY)
        if access_token:
            return access_token
        tokens = self.refresh()
        return tokens.access_token if tokens else None

    def is_authenticated(self) -> bool:
        """True if an access token exists and is not past its recorded expiry."""
        session = self.load_session()
        if not session.access_token:
            return False
        if session.expires_at is not None and self._clock() > session.expires_at:
            return self.refresh() is not None
        return True

    def refresh(self) -> TokenResponse | None:
        """
        Exchange the stored refresh token for new tokens.

        Returns:
            The new tokens, or None if no refresh token is stored or the
            exchange failed. Stored state is untouched on failure.
        """
        refresh_token = self.store.get(OAUTH_REFRESH_TOKEN_KEY)
        if not refresh_token:
            logger.info("No refresh token available")
            return None

        try:
            tokens = self._request_tokens(
                {
                    "grant_type": "refresh_token",
                    "refresh_token": refresh_token,
                    "client_id": self.config.client_id,
                    "client_secret": self.config.client_secret,
                }
            )
        except AuthenticationRequiredError as e:
            logger.error(f"Token refresh failed: {e}")
            return None

        self._store_tokens(tokens)
        logger.info("Token refreshed successfully")
        return tokens

    def authorization_url(self, redirect_uri: str) -> str:
        """URL that starts the authorization-code flow."""
        params = urlencode(
            {
                "client_id": self.config.client_id or "",
                "redirect_uri": redirect_uri,
                "response_type": "code",
            }
        )
        return f"{self.config.auth_url}?{params}"

    def exchange_code(self, code: str, redirect_uri: str) -> TokenResponse:
        """
        Exchange an authorization code and store the resulting session.

        Raises:
            AuthenticationRequiredError: If the token endpoint rejects the code
        """
        tokens = self._request_tokens(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
            }
        )
        self._store_tokens(tokens)
        return tokens

    def store_user_info(self, user_info: dict) -> None:
        self.store.put(OAUTH_USER_INFO_KEY, json.dumps(user_info))

    def _request_tokens(self, form: dict) -> TokenResponse:
        try:
            response = self.session.post(
                self.config.token_url,
                data=form,
                headers={"Accept": "application/json"},
                timeout=self.config.http_timeout,
            )
        except requests.RequestException as e:
            raise AuthenticationRequiredError(f"Token endpoint unreachable: {e}")

        if not response.ok:
            raise AuthenticationRequiredError(
                f"Token endpoint returned {response.status_code}: {response.text}"
            )
        try:
            return TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise AuthenticationRequiredError(f"Invalid token response: {e}")

    def _store_tokens(self, tokens: TokenResponse) -> None:
        # A zero or negative lifetime still has to expire
        expires_in = max(tokens.expires_in, 1)
        self.store.put(OAUTH_ACCESS_TOKEN_KEY, tokens.access_token, ttl=expires_in)
        if tokens.refresh_token:
            self.store.put(OAUTH_REFRESH_TOKEN_KEY, tokens.refresh_token)
        expires_at = self._clock() + expires_in * 1000
        self.store.put(OAUTH_EXPIRES_AT_KEY, str(expires_at))
