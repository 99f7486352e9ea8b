"""Calendar token mapping model."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FilterType = Literal["all", "games"]


class TokenMapping(BaseModel):
    """Team and filter a calendar token stands for."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    team_id: str = Field(alias="teamId", min_length=1)
    filter_type: FilterType = Field(alias="filterType")

    def to_json(self) -> str:
        """Serialize with the camelCase keys used in the store."""
        return self.model_dump_json(by_alias=True)
