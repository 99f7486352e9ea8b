"""Display titles and descriptions for TeamSnap events.

Pure functions of an event and the team's naming preferences. Output uses
real newlines; ICS escaping happens in the writer.
"""

import logging
import re
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from teamfeed.models.event import Event
from teamfeed.models.preferences import TeamPreferences

logger = logging.getLogger(__name__)

DEFAULT_TEAM_NAME = "Team"
PLACEHOLDER_LOCATION_DETAILS = "TBD"


def display_team_name(preferences: TeamPreferences, team_name: str | None) -> str:
    """Custom name, else upstream name, else a generic placeholder."""
    return preferences.custom_name or team_name or DEFAULT_TEAM_NAME


def replace_team_name(title: str, team_name: str | None, custom_name: str | None) -> str:
    """Replace every case-insensitive occurrence of team_name with custom_name."""
    if not team_name or not custom_name:
        return title
    return re.sub(re.escape(team_name), lambda _: custom_name, title, flags=re.IGNORECASE)


def synthesize_title(
    event: Event, preferences: TeamPreferences, team_name: str | None = None
) -> str:
    """
    Build the event summary.

    Args:
        event: Upstream event
        preferences: Team naming preferences
        team_name: Upstream team name, if known

    Returns:
        Display title
    """
    team = display_team_name(preferences, team_name)

    if event.is_game:
        if event.opponent_name:
            if preferences.remove_opponent_names:
                return f"{team}: Game"
            return f"{team} vs. {event.opponent_name}"
        # Games without opponent data keep the upstream title
        original = (
            event.formatted_title_for_multi_team
            or event.formatted_title
            or event.name
            or "Untitled Event"
        )
        return replace_team_name(original, team_name, preferences.custom_name)

    if event.formatted_title:
        return f"{team}: {event.formatted_title}"
    if event.formatted_title_for_multi_team:
        return replace_team_name(
            event.formatted_title_for_multi_team, team_name, preferences.custom_name
        )
    return event.label or event.name or "Event"


def _zone(name: str | None, default_timezone: str) -> ZoneInfo:
    for candidate in (name, default_timezone):
        if not candidate:
            continue
        try:
            return ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown time zone {candidate!r}")
    return ZoneInfo("UTC")


def format_local_time(
    moment: datetime, zone_name: str | None, default_timezone: str = "UTC"
) -> str:
    """Clock time like "6:30 PM" in the given zone."""
    local = moment.astimezone(_zone(zone_name, default_timezone))
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {meridiem}"


def _game_line(event: Event) -> str:
    opponent = event.opponent_name
    if event.game_type == "Home":
        return f"Home vs. {opponent}"
    if event.game_type == "Away":
        return f"Away at {opponent}"
    return f"{event.label or 'TBD'} vs. {opponent}"


def synthesize_description(event: Event, default_timezone: str = "UTC") -> str:
    """
    Build the multi-line event description.

    Lines appear only when their source field is present.
    """
    parts = []

    if event.is_game and event.opponent_name:
        parts.append(f"{_game_line(event)}\n")

    if event.uniform:
        parts.append(f"Uniform: {event.uniform}\n")

    if event.location_name:
        parts.append(f"\n{event.location_name}")
        details = event.additional_location_details
        if details and details != PLACEHOLDER_LOCATION_DETAILS:
            parts.append(f"\n{details}")
        parts.append("\n")

    if event.is_game and event.arrival_date and event.minutes_to_arrive_early:
        arrival = format_local_time(
            event.arrival_date, event.time_zone_iana_name, default_timezone
        )
        parts.append(f"Arrival: {arrival} · {event.minutes_to_arrive_early} min. early\n")

    if event.notes:
        parts.append(f"\n{event.notes}\n")

    return "".join(parts)
