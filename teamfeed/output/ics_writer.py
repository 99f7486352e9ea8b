"""ICS document writer for team feeds."""

import hashlib
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from icalendar import Calendar, Event as ICalEvent

from teamfeed.constants import DEFAULT_EVENT_DURATION_HOURS, PRODID, TEAMSNAP_EVENT_URL
from teamfeed.models.event import Event
from teamfeed.models.preferences import TeamPreferences
from teamfeed.processing.title_synthesizer import synthesize_description, synthesize_title

logger = logging.getLogger(__name__)

LocationLookup = Callable[[str], str | None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ICSWriter:
    """Renders TeamSnap events into an iCalendar document.

    Text values are escaped by icalendar's ``vText`` (comma, semicolon,
    backslash and newline), so titles, descriptions and locations are passed
    in unescaped.
    """

    def __init__(
        self,
        location_lookup: LocationLookup | None = None,
        default_timezone: str = "UTC",
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize writer.

        Args:
            location_lookup: Returns a formatted address for a location id, or
                None when the address cannot be fetched
            default_timezone: Zone for arrival times of events without one
            clock: Source of the current UTC time (DTSTAMP)
        """
        self.location_lookup = location_lookup
        self.default_timezone = default_timezone
        self._clock = clock

    def render(
        self,
        team_id: str,
        events: list[Event],
        preferences: TeamPreferences,
        team_name: str | None = None,
    ) -> str:
        """
        Build the feed document.

        Events without a start date are skipped. Location lookups happen
        sequentially in event order.

        Returns:
            The calendar as a CRLF-delimited string
        """
        cal = Calendar()
        cal.add("prodid", PRODID)
        cal.add("version", "2.0")
        cal.add("calscale", "GREGORIAN")
        cal.add("method", "PUBLISH")

        calendar_name = preferences.custom_name or team_name
        if calendar_name:
            cal.add("X-WR-CALNAME", calendar_name)

        now = self._clock()
        rendered = 0
        for event_model in events:
            if event_model.start_date is None:
                continue
            cal.add_component(
                self._build_event(team_id, event_model, preferences, team_name, now)
            )
            rendered += 1

        logger.info(f"Rendered {rendered} of {len(events)} events for team {team_id}")
        return cal.to_ical().decode("utf-8")

    def _build_event(
        self,
        team_id: str,
        event_model: Event,
        preferences: TeamPreferences,
        team_name: str | None,
        now: datetime,
    ) -> ICalEvent:
        start = event_model.start_date.astimezone(timezone.utc)
        if event_model.end_date is not None:
            end = event_model.end_date.astimezone(timezone.utc)
        else:
            end = start + timedelta(hours=DEFAULT_EVENT_DURATION_HOURS)

        title = synthesize_title(event_model, preferences, team_name)
        description = synthesize_description(event_model, self.default_timezone)

        event = ICalEvent()
        event.add("uid", self._uid(team_id, event_model, start))
        event.add("dtstart", start)
        event.add("dtend", end)
        event.add("summary", title)
        if description:
            event.add("description", description)

        location = self._location_text(event_model)
        if location:
            event.add("location", location)

        if event_model.id:
            event.add(
                "url",
                TEAMSNAP_EVENT_URL.format(team_id=team_id, event_id=event_model.id),
            )

        updated_at = event_model.updated_at or now
        event.add("last-modified", updated_at.astimezone(timezone.utc))
        event.add("dtstamp", now)
        return event

    def _uid(self, team_id: str, event_model: Event, start: datetime) -> str:
        if event_model.id:
            return f"teamsnap-{event_model.id}@teamsnap.com"
        # No upstream id: derive one from the team and start time
        digest = hashlib.sha1(f"{team_id}:{start.isoformat()}".encode("utf-8")).hexdigest()
        return f"teamsnap-{digest[:16]}@teamsnap.com"

    def _location_text(self, event_model: Event) -> str | None:
        """Location name, plus the street address on a second line when known."""
        if not event_model.location_name:
            return None
        if event_model.location_id and self.location_lookup is not None:
            address = self.location_lookup(event_model.location_id)
            if address:
                return f"{event_model.location_name}\n{address}"
        return event_model.location_name
