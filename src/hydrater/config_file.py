"""Typed parsing and validation for matching config files."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import ConfigFileNotFoundError, ConfigFileParseError, ConfigFileValidationError
from .protocols import FileSystem

_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class MatchingConfigFile:
    """Validated matching config values loaded from a TOML file."""

    source_type: str | None = None
    supabase_url: str | None = None
    snapshot_path: str | None = None
    min_compatibility: float | None = None
    min_confidence: float | None = None
    max_workers: int | None = None
    top_fountains_limit: int | None = None
    coldness_weight: float | None = None
    pressure_weight: float | None = None
    experience_weight: float | None = None
    yum_factor_weight: float | None = None
    correlation_weight: float | None = None
    similarity_weight: float | None = None
    confidence_saturation_count: int | None = None


class _MatchingSectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    source_type: str | None = None
    supabase_url: str | None = None
    snapshot_path: str | None = None
    min_compatibility: float | None = None
    min_confidence: float | None = None
    max_workers: int | None = None
    top_fountains_limit: int | None = None
    coldness_weight: float | None = None
    pressure_weight: float | None = None
    experience_weight: float | None = None
    yum_factor_weight: float | None = None
    correlation_weight: float | None = None
    similarity_weight: float | None = None
    confidence_saturation_count: int | None = None

    @field_validator("source_type")
    @classmethod
    def _validate_source_type(cls, value: str | None) -> str | None:
        if value is None:
            return None
        source = value.strip().lower()
        if source not in {"api", "file"}:
            raise ValueError
        return source

    @field_validator("supabase_url", "snapshot_path")
    @classmethod
    def _validate_non_empty_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError
        return text.rstrip("/")

    @field_validator("max_workers", "top_fountains_limit", "confidence_saturation_count")
    @classmethod
    def _validate_positive_int(cls, value: int | None) -> int | None:
        if value is None:
            return None
        if value < 1:
            raise ValueError
        return value

    @field_validator(
        "min_compatibility",
        "min_confidence",
        "coldness_weight",
        "pressure_weight",
        "experience_weight",
        "yum_factor_weight",
        "correlation_weight",
        "similarity_weight",
    )
    @classmethod
    def _validate_unit_interval(cls, value: float | None) -> float | None:
        if value is None:
            return None
        if value < 0.0 or value > 1.0:
            raise ValueError
        return value


class _ConfigFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    matching: _MatchingSectionModel

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def load_matching_config_file(*, path: Path, fs: FileSystem) -> MatchingConfigFile:
    """Load and validate a matching TOML config file."""
    if not fs.exists(path):
        raise ConfigFileNotFoundError(str(path))

    raw_payload = fs.read_text(path)
    try:
        payload: object = tomllib.loads(raw_payload)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileParseError(str(path), str(exc)) from exc

    try:
        model = _ConfigFileModel.model_validate(payload)
    except ValidationError as exc:
        raise ConfigFileValidationError(str(path), _format_validation_error(exc)) from exc

    section = model.matching
    return MatchingConfigFile(
        source_type=section.source_type,
        supabase_url=section.supabase_url,
        snapshot_path=section.snapshot_path,
        min_compatibility=section.min_compatibility,
        min_confidence=section.min_confidence,
        max_workers=section.max_workers,
        top_fountains_limit=section.top_fountains_limit,
        coldness_weight=section.coldness_weight,
        pressure_weight=section.pressure_weight,
        experience_weight=section.experience_weight,
        yum_factor_weight=section.yum_factor_weight,
        correlation_weight=section.correlation_weight,
        similarity_weight=section.similarity_weight,
        confidence_saturation_count=section.confidence_saturation_count,
    )
