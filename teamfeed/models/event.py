"""TeamSnap event model with Pydantic v2 validation."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class Event(BaseModel):
    """Raw event attributes as returned by the TeamSnap events endpoint.

    Every field is optional. Values that fail validation are dropped by
    ``from_data`` so a malformed upstream record degrades to missing fields
    instead of raising.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str | None = None
    label: str | None = None
    name: str | None = None
    is_game: bool = False
    is_canceled: bool = False
    game_type: str | None = None
    opponent_name: str | None = None
    uniform: str | None = None
    location_name: str | None = None
    location_id: str | None = None
    additional_location_details: str | None = None
    arrival_date: datetime | None = None
    minutes_to_arrive_early: int | None = None
    notes: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    updated_at: datetime | None = None
    formatted_title: str | None = None
    formatted_title_for_multi_team: str | None = None
    time_zone_iana_name: str | None = None

    @field_validator("is_game", "is_canceled", mode="before")
    @classmethod
    def none_is_false(cls, v):
        """TeamSnap sends null for unset flags."""
        if v is None:
            return False
        return v

    @field_validator("arrival_date", "start_date", "end_date", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Treat naive timestamps as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_data(cls, data: dict) -> "Event":
        """Build an event, discarding any attribute that fails validation."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
            cleaned = {k: v for k, v in data.items() if k not in invalid}
            return cls.model_validate(cleaned)

    @property
    def is_game_like(self) -> bool:
        """True for games: explicit "Game" type or a named opponent."""
        return self.game_type == "Game" or bool(self.opponent_name)

    @property
    def updated_at_millis(self) -> int | None:
        """updated_at as epoch milliseconds."""
        if self.updated_at is None:
            return None
        return int(round(self.updated_at.timestamp() * 1000))
