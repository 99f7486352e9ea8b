"""Output layer for feed documents."""

from teamfeed.output.ics_writer import ICSWriter

__all__ = [
    "ICSWriter",
]
