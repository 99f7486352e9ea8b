"""OAuth token models."""

from pydantic import BaseModel, ConfigDict


class TokenResponse(BaseModel):
    """Token endpoint response."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str | None = None
    expires_in: int = 7200


class OAuthSession(BaseModel):
    """Stored single-owner OAuth state."""

    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: int | None = None
    user_info: dict | None = None
