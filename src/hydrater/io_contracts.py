"""Boundary-neutral IO contracts for infrastructure validation.

Usage example:
    from hydrater.io_contracts import RatingRowIO

    row: RatingRowIO = {
        "fountain_id": "f-101",
        "coldness": 5,
        "pressure": 4,
        "experience": 4,
        "yum_factor": 3,
    }
"""

from __future__ import annotations

from typing import TypedDict


class RatingRowIO(TypedDict):
    """A single rating row after payload validation.

    A ``None`` dimension means the store has no value for it; such rows are
    treated as unrated.
    """

    fountain_id: str
    coldness: int | None
    pressure: int | None
    experience: int | None
    yum_factor: int | None


class UserRowIO(TypedDict):
    """A user directory row after payload validation."""

    id: str
    display_name: str | None
    email: str | None
    total_ratings: int
    badges: list[str]
