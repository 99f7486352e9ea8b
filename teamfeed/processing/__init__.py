"""Event filtering and text synthesis."""

from teamfeed.processing.event_filter import (
    EventFetcher,
    apply_filter,
    drop_cancelled,
    filter_events,
    latest_update_timestamp,
)
from teamfeed.processing.title_synthesizer import (
    display_team_name,
    synthesize_description,
    synthesize_title,
)

__all__ = [
    "EventFetcher",
    "apply_filter",
    "drop_cancelled",
    "filter_events",
    "latest_update_timestamp",
    "display_team_name",
    "synthesize_description",
    "synthesize_title",
]
