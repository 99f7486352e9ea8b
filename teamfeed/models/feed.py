"""Cached feed model."""

from pydantic import BaseModel


class CachedFeed(BaseModel):
    """A rendered feed and the watermark it was rendered at."""

    ics_body: str
    last_update: int
