"""Tests for rating records and rating-set ingestion."""

import pytest

from hydrater.domain.ratings import (
    RatingRecord,
    build_rating_set,
    rating_record_from_row,
)
from hydrater.exceptions import InvalidRatingValueError
from hydrater.io_contracts import RatingRowIO


def _row(
    fountain_id: str,
    coldness: int | None,
    pressure: int | None,
    experience: int | None,
    yum_factor: int | None,
) -> RatingRowIO:
    return {
        "fountain_id": fountain_id,
        "coldness": coldness,
        "pressure": pressure,
        "experience": experience,
        "yum_factor": yum_factor,
    }


class TestRatingRecord:
    def test_values_and_average(self) -> None:
        record = RatingRecord("f-1", 5, 4, 3, 2)

        assert record.values == (5, 4, 3, 2)
        assert record.average == 3.5

    @pytest.mark.parametrize("value", [0, 6, -1])
    def test_rejects_out_of_range_values(self, value: int) -> None:
        with pytest.raises(InvalidRatingValueError) as exc_info:
            RatingRecord("f-1", 3, value, 3, 3)

        assert exc_info.value.dimension == "pressure"
        assert exc_info.value.value == value
        assert "f-1" in str(exc_info.value)

    def test_rejects_booleans(self) -> None:
        with pytest.raises(InvalidRatingValueError):
            RatingRecord("f-1", True, 3, 3, 3)

    def test_accepts_scale_bounds(self) -> None:
        record = RatingRecord("f-1", 1, 5, 1, 5)

        assert record.average == 3.0


class TestIngestion:
    def test_rating_record_from_row_returns_none_when_unrated(self) -> None:
        assert rating_record_from_row(_row("f-1", 4, 4, 0, 4)) is None
        assert rating_record_from_row(_row("f-1", 3, None, 3, 3)) is None

    def test_rating_record_from_row_rejects_six(self) -> None:
        with pytest.raises(InvalidRatingValueError):
            rating_record_from_row(_row("f-1", 6, 4, 4, 4))

    def test_build_rating_set_skips_unrated_rows(self) -> None:
        ratings = build_rating_set(
            [
                _row("f-1", 5, 4, 4, 3),
                _row("f-2", 0, 0, 0, 0),
                _row("f-3", 2, None, 2, 2),
            ]
        )

        assert list(ratings) == ["f-1"]
        assert ratings["f-1"].values == (5, 4, 4, 3)

    def test_build_rating_set_later_duplicate_wins(self) -> None:
        ratings = build_rating_set([_row("f-1", 1, 1, 1, 1), _row("f-1", 5, 5, 5, 5)])

        assert ratings["f-1"].values == (5, 5, 5, 5)

    def test_build_rating_set_empty(self) -> None:
        assert build_rating_set([]) == {}
