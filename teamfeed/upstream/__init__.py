"""TeamSnap API access and OAuth."""

from teamfeed.upstream.oauth import OAuthTokenManager
from teamfeed.upstream.teamsnap_client import TeamSnapClient, collection_items

__all__ = [
    "OAuthTokenManager",
    "TeamSnapClient",
    "collection_items",
]
