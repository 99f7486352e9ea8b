"""Shared constants for team feeds."""

# TeamSnap endpoints
TEAMSNAP_AUTH_URL = "https://auth.teamsnap.com/oauth/authorize"
TEAMSNAP_TOKEN_URL = "https://auth.teamsnap.com/oauth/token"
TEAMSNAP_API_URL = "https://api.teamsnap.com/v3"
TEAMSNAP_EVENT_URL = "https://go.teamsnap.com/{team_id}/schedule/view_event/{event_id}"

# Filter types
FILTER_ALL = "all"
FILTER_GAMES = "games"
FILTER_TYPES = (FILTER_ALL, FILTER_GAMES)

# Store key layout
TOKEN_KEY_PREFIX = "calendar_token:"
FEED_KEY_PREFIX = "calendar_"
FEED_LASTUPDATE_SUFFIX = "_lastupdate"
CUSTOM_NAME_KEY_PREFIX = "custom_team_name_"
REMOVE_OPPONENTS_KEY_PREFIX = "remove_opponent_names_"
OAUTH_ACCESS_TOKEN_KEY = "oauth_access_token"
OAUTH_REFRESH_TOKEN_KEY = "oauth_refresh_token"
OAUTH_EXPIRES_AT_KEY = "oauth_expires_at"
OAUTH_USER_INFO_KEY = "oauth_user_info"

# Expiry (seconds)
TOKEN_MAPPING_TTL = 31536000
FEED_CACHE_TTL = 3600

# Token derivation
TOKEN_LENGTH = 32
FALLBACK_TOKEN_SECRET = "fallback-salt"

# ICS output
PRODID = "-//TeamSnap Custom Calendar//TeamSnap Events//EN"
DEFAULT_EVENT_DURATION_HOURS = 2
CACHE_CONTROL = "public, max-age=3600"
