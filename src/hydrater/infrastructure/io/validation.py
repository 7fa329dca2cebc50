"""Pydantic-based validation helpers for inbound IO payloads."""

from __future__ import annotations

from typing import TypedDict

from pydantic import TypeAdapter, ValidationError

from ...exceptions import HydraterError
from ...io_contracts import RatingRowIO, UserRowIO


class IncomingDataError(HydraterError, ValueError):
    """Raised when inbound data fails validation."""


class RatingRowInput(TypedDict, total=False):
    fountain_id: str
    coldness: int | None
    pressure: int | None
    experience: int | None
    yum_factor: int | None


class OwnedRatingRowInput(RatingRowInput, total=False):
    user_id: str


class UserRowInput(TypedDict, total=False):
    id: str
    display_name: str | None
    email: str | None
    total_ratings: int | None
    badges: list[str] | None


class SnapshotInput(TypedDict, total=False):
    users: list[UserRowInput]
    ratings: list[OwnedRatingRowInput]


def validate_as[SchemaT](schema: type[SchemaT], payload: object) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_python(payload)
    except ValidationError as exc:
        message = f"Invalid payload for {schema}."
        raise IncomingDataError(message) from exc


def validate_json_as[SchemaT](schema: type[SchemaT], payload: str | bytes | bytearray) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_json(payload)
    except ValidationError as exc:
        message = f"Invalid JSON payload for {schema}."
        raise IncomingDataError(message) from exc


def _require_text(value: object, field_name: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise IncomingDataError(f"Missing required field: {field_name}.")
    return text


def _to_rating_row(row: RatingRowInput) -> RatingRowIO:
    return {
        "fountain_id": _require_text(row.get("fountain_id"), "fountain_id"),
        "coldness": row.get("coldness"),
        "pressure": row.get("pressure"),
        "experience": row.get("experience"),
        "yum_factor": row.get("yum_factor"),
    }


def parse_rating_rows(payload: object) -> list[RatingRowIO]:
    """Validate a list of rating rows from the ratings table."""
    rows = validate_as(list[RatingRowInput], payload)
    return [_to_rating_row(row) for row in rows]


def parse_user_row(payload: object) -> UserRowIO:
    """Validate a single user row from the users table."""
    row = validate_as(UserRowInput, payload)
    return {
        "id": _require_text(row.get("id"), "id"),
        "display_name": row.get("display_name"),
        "email": row.get("email"),
        "total_ratings": row.get("total_ratings") or 0,
        "badges": [badge for badge in (row.get("badges") or []) if badge],
    }


def parse_user_rows(payload: object) -> list[UserRowIO]:
    """Validate a list of user rows."""
    rows = validate_as(list[object], payload)
    return [parse_user_row(row) for row in rows]


def parse_snapshot(payload: object) -> tuple[list[UserRowIO], dict[str, list[RatingRowIO]]]:
    """Validate a ratings snapshot into user rows and rating rows grouped by user."""
    snapshot = validate_as(SnapshotInput, payload)
    users = [parse_user_row(row) for row in snapshot.get("users", [])]
    ratings_by_user: dict[str, list[RatingRowIO]] = {}
    for row in snapshot.get("ratings", []):
        user_id = _require_text(row.get("user_id"), "user_id")
        ratings_by_user.setdefault(user_id, []).append(_to_rating_row(row))
    return users, ratings_by_user
