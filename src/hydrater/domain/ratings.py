"""Validated fountain ratings and the per-user rating set.

Usage example:
    from hydrater.domain.ratings import build_rating_set

    ratings = build_rating_set(
        [
            {"fountain_id": "f-1", "coldness": 5, "pressure": 4, "experience": 4, "yum_factor": 3},
            {"fountain_id": "f-2", "coldness": 0, "pressure": 0, "experience": 0, "yum_factor": 0},
        ]
    )
    assert list(ratings) == ["f-1"]  # all-zero rows are unrated
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ..exceptions import InvalidRatingValueError
from ..io_contracts import RatingRowIO

MIN_RATING = 1
MAX_RATING = 5
UNRATED = 0

RATING_DIMENSIONS = ("coldness", "pressure", "experience", "yum_factor")


@dataclass(frozen=True)
class RatingRecord:
    """One user's four-dimension rating of one fountain."""

    fountain_id: str
    coldness: int
    pressure: int
    experience: int
    yum_factor: int

    def __post_init__(self) -> None:
        for dimension, value in zip(RATING_DIMENSIONS, self.values, strict=True):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidRatingValueError(self.fountain_id, dimension, value)
            if value < MIN_RATING or value > MAX_RATING:
                raise InvalidRatingValueError(self.fountain_id, dimension, value)

    @property
    def values(self) -> tuple[int, int, int, int]:
        """Dimension values in (coldness, pressure, experience, yum_factor) order."""
        return (self.coldness, self.pressure, self.experience, self.yum_factor)

    @property
    def average(self) -> float:
        """Mean of the four dimensions."""
        return sum(self.values) / len(RATING_DIMENSIONS)


type UserRatingSet = Mapping[str, RatingRecord]


def _row_values(row: RatingRowIO) -> tuple[int | None, int | None, int | None, int | None]:
    return (row["coldness"], row["pressure"], row["experience"], row["yum_factor"])


def rating_record_from_row(row: RatingRowIO) -> RatingRecord | None:
    """Convert a validated row into a RatingRecord, or None when it is unrated.

    Raises:
        InvalidRatingValueError: If a dimension is set but outside 1-5.
    """
    coldness, pressure, experience, yum_factor = _row_values(row)
    if coldness is None or pressure is None or experience is None or yum_factor is None:
        return None
    if UNRATED in (coldness, pressure, experience, yum_factor):
        return None
    return RatingRecord(
        fountain_id=row["fountain_id"],
        coldness=coldness,
        pressure=pressure,
        experience=experience,
        yum_factor=yum_factor,
    )


def build_rating_set(rows: Iterable[RatingRowIO]) -> dict[str, RatingRecord]:
    """Build a rating set keyed by fountain, skipping unrated rows.

    The store guarantees one rating per (user, fountain); if a duplicate does
    appear the later row wins.
    """
    ratings: dict[str, RatingRecord] = {}
    for row in rows:
        record = rating_record_from_row(row)
        if record is None:
            continue
        ratings[record.fountain_id] = record
    return ratings
