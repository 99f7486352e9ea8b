"""Per-team naming preferences."""

from pydantic import BaseModel, ConfigDict, Field


class TeamPreferences(BaseModel):
    """Team-specific naming settings.

    Set through the team settings endpoint and read while rendering feeds and
    listing calendars.
    """

    model_config = ConfigDict(populate_by_name=True)

    custom_name: str | None = Field(default=None, alias="customName")
    remove_opponent_names: bool = Field(default=False, alias="removeOpponentNames")
