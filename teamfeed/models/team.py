"""Team and location models."""

from pydantic import BaseModel, ConfigDict


class Team(BaseModel):
    """A TeamSnap team."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    name: str | None = None


class Location(BaseModel):
    """A TeamSnap location record."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None

    @property
    def formatted_address(self) -> str | None:
        """Address parts joined by spaces, or None if there are none."""
        parts = [p for p in (self.address, self.city, self.state, self.postal_code) if p]
        if not parts:
            return None
        return " ".join(parts)
