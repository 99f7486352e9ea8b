"""Exception hierarchy for feed operations."""


class TeamFeedError(Exception):
    """Base exception for feed operations."""

    status_code = 500


class InvalidTokenError(TeamFeedError):
    """Calendar token does not resolve to a team."""

    status_code = 400


class AuthenticationRequiredError(TeamFeedError):
    """No usable access or refresh token; the owner must re-authorize."""

    status_code = 401


class AccessDeniedError(TeamFeedError):
    """Authenticated user is not the configured owner."""

    status_code = 403


class UpstreamFetchError(TeamFeedError):
    """Error talking to the TeamSnap API."""

    status_code = 500

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class StoreUnavailableError(UpstreamFetchError):
    """Key-value store could not be read or written."""

    pass
