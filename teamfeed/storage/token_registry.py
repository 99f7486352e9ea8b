"""Calendar token registry."""

import hashlib
import logging

from pydantic import ValidationError

from teamfeed.constants import TOKEN_KEY_PREFIX, TOKEN_LENGTH, TOKEN_MAPPING_TTL
from teamfeed.models.token import FilterType, TokenMapping
from teamfeed.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


def derive_token(team_name: str, filter_type: str, secret: str) -> str:
    """Deterministic 32-hex-character token for a team feed."""
    data = f"{team_name}:{filter_type}:{secret}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()[:TOKEN_LENGTH]


class TokenRegistry:
    """Maps opaque calendar tokens to team feeds."""

    def __init__(self, store: KeyValueStore, secret: str):
        """
        Initialize registry.

        Args:
            store: Key-value store holding the token mappings
            secret: Server secret mixed into every token digest
        """
        self.store = store
        self.secret = secret

    def token_for(self, team_name: str, filter_type: FilterType) -> str:
        """Compute the token without persisting anything."""
        return derive_token(team_name, filter_type, self.secret)

    def issue(self, team_id: str, filter_type: FilterType, team_name: str) -> str:
        """
        Compute the token for a team feed and (re)write its mapping.

        Args:
            team_id: TeamSnap team id
            filter_type: "all" or "games"
            team_name: Upstream team name used in the digest

        Returns:
            The calendar token
        """
        token = self.token_for(team_name, filter_type)
        mapping = TokenMapping(team_id=str(team_id), filter_type=filter_type)
        self.store.put(f"{TOKEN_KEY_PREFIX}{token}", mapping.to_json(), ttl=TOKEN_MAPPING_TTL)
        return token

    def resolve(self, token: str) -> TokenMapping | None:
        """Look up a token. Absent and malformed mappings both return None."""
        raw = self.store.get(f"{TOKEN_KEY_PREFIX}{token}")
        if raw is None:
            return None
        try:
            return TokenMapping.model_validate_json(raw)
        except ValidationError:
            logger.warning(f"Malformed mapping stored for calendar token {token}")
            return None
