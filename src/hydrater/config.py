"""Centralised, injectable configuration for the matching engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from .config_file import MatchingConfigFile
from .domain.compatibility import (
    DEFAULT_COLDNESS_WEIGHT,
    DEFAULT_CONFIDENCE_SATURATION_COUNT,
    DEFAULT_CORRELATION_WEIGHT,
    DEFAULT_EXPERIENCE_WEIGHT,
    DEFAULT_PRESSURE_WEIGHT,
    DEFAULT_SIMILARITY_WEIGHT,
    DEFAULT_YUM_FACTOR_WEIGHT,
    CompatibilityWeights,
    DimensionWeights,
)
from .domain.date_planning import DEFAULT_TOP_FOUNTAINS_LIMIT
from .domain.matching import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_MIN_COMPATIBILITY,
    DEFAULT_MIN_CONFIDENCE,
    MatchThresholds,
)
from .exceptions import SourceTypeError

SOURCE_TYPES = frozenset({"api", "file"})


class PositiveIntegerEnvVarError(ValueError):
    """Raised when an environment variable must be a positive integer."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive integer.")


class UnitIntervalEnvVarError(ValueError):
    """Raised when an environment variable must be a number between 0 and 1."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a number between 0 and 1.")


@dataclass(frozen=True)
class MatchingConfig:
    """Immutable configuration object for matching commands.

    Load from environment with `MatchingConfig.from_env()` or construct directly for testing.
    """

    # Data source
    source_type: str = "api"
    supabase_url: str = ""
    supabase_key: str = ""
    snapshot_path: str = "data/hydrater_snapshot.json"

    # Supabase client resilience
    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_factor: float = 0.5
    backoff_max_seconds: float = 60.0
    backoff_jitter_seconds: float = 0.1
    max_rpm: int = 600
    min_delay_seconds: float = 0.0
    circuit_breaker_threshold: int = 5
    circuit_breaker_timeout_seconds: float = 60.0

    # Matching
    min_compatibility: float = DEFAULT_MIN_COMPATIBILITY
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    max_workers: int = DEFAULT_MAX_WORKERS
    top_fountains_limit: int = DEFAULT_TOP_FOUNTAINS_LIMIT

    # Scoring weights
    coldness_weight: float = DEFAULT_COLDNESS_WEIGHT
    pressure_weight: float = DEFAULT_PRESSURE_WEIGHT
    experience_weight: float = DEFAULT_EXPERIENCE_WEIGHT
    yum_factor_weight: float = DEFAULT_YUM_FACTOR_WEIGHT
    correlation_weight: float = DEFAULT_CORRELATION_WEIGHT
    similarity_weight: float = DEFAULT_SIMILARITY_WEIGHT
    confidence_saturation_count: int = DEFAULT_CONFIDENCE_SATURATION_COUNT

    # Optional TOML file applied on top of env values
    config_file_path: str = ""

    @property
    def thresholds(self) -> MatchThresholds:
        return MatchThresholds(
            min_compatibility=self.min_compatibility,
            min_confidence=self.min_confidence,
        )

    @property
    def compatibility_weights(self) -> CompatibilityWeights:
        """Build scoring weights (raises DimensionWeightsError if they do not sum to 1)."""
        return CompatibilityWeights(
            dimensions=DimensionWeights(
                coldness=self.coldness_weight,
                pressure=self.pressure_weight,
                experience=self.experience_weight,
                yum_factor=self.yum_factor_weight,
            ),
            correlation_weight=self.correlation_weight,
            similarity_weight=self.similarity_weight,
            confidence_saturation_count=self.confidence_saturation_count,
        )

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.

        Returns:
            MatchingConfig instance populated from environment.
        """
        load_dotenv(dotenv_path)

        return cls(
            source_type=_parse_source_type(os.getenv("HYDRATER_SOURCE", "api")),
            supabase_url=os.getenv("SUPABASE_URL", "").strip().rstrip("/"),
            supabase_key=os.getenv("SUPABASE_KEY", "").strip(),
            snapshot_path=os.getenv("HYDRATER_SNAPSHOT_PATH", "data/hydrater_snapshot.json").strip()
            or "data/hydrater_snapshot.json",
            timeout_seconds=float(os.getenv("HYDRATER_TIMEOUT_SECONDS", "30")),
            max_retries=int(os.getenv("HYDRATER_MAX_RETRIES", "3")),
            backoff_factor=float(os.getenv("HYDRATER_BACKOFF_FACTOR", "0.5")),
            backoff_max_seconds=float(os.getenv("HYDRATER_BACKOFF_MAX_SECONDS", "60")),
            backoff_jitter_seconds=float(os.getenv("HYDRATER_BACKOFF_JITTER_SECONDS", "0.1")),
            max_rpm=int(os.getenv("HYDRATER_MAX_RPM", "600")),
            min_delay_seconds=float(os.getenv("HYDRATER_MIN_DELAY_SECONDS", "0")),
            circuit_breaker_threshold=int(os.getenv("HYDRATER_CIRCUIT_BREAKER_THRESHOLD", "5")),
            circuit_breaker_timeout_seconds=float(
                os.getenv("HYDRATER_CIRCUIT_BREAKER_TIMEOUT_SECONDS", "60")
            ),
            min_compatibility=_parse_unit_interval(
                os.getenv("HYDRATER_MIN_COMPATIBILITY", ""),
                env_name="HYDRATER_MIN_COMPATIBILITY",
                default=DEFAULT_MIN_COMPATIBILITY,
            ),
            min_confidence=_parse_unit_interval(
                os.getenv("HYDRATER_MIN_CONFIDENCE", ""),
                env_name="HYDRATER_MIN_CONFIDENCE",
                default=DEFAULT_MIN_CONFIDENCE,
            ),
            max_workers=_parse_positive_int(
                os.getenv("HYDRATER_MAX_WORKERS", ""),
                env_name="HYDRATER_MAX_WORKERS",
                default=DEFAULT_MAX_WORKERS,
            ),
            config_file_path=os.getenv("HYDRATER_CONFIG_FILE", "").strip(),
        )

    def with_overrides(
        self,
        *,
        source_type: str | None = None,
        snapshot_path: str | None = None,
        min_compatibility: float | None = None,
        min_confidence: float | None = None,
        max_workers: int | None = None,
    ) -> Self:
        """Return a new config with specified overrides (for CLI options)."""
        return replace(
            self,
            source_type=self.source_type
            if source_type is None
            else _parse_source_type(source_type),
            snapshot_path=self.snapshot_path if snapshot_path is None else snapshot_path.strip(),
            min_compatibility=self.min_compatibility
            if min_compatibility is None
            else min_compatibility,
            min_confidence=self.min_confidence if min_confidence is None else min_confidence,
            max_workers=self.max_workers if max_workers is None else max_workers,
        )

    def with_file_overrides(self, file_config: MatchingConfigFile) -> Self:
        """Return a new config with config-file values overriding env/default values."""
        return replace(
            self,
            source_type=self.source_type
            if file_config.source_type is None
            else file_config.source_type,
            supabase_url=self.supabase_url
            if file_config.supabase_url is None
            else file_config.supabase_url,
            snapshot_path=self.snapshot_path
            if file_config.snapshot_path is None
            else file_config.snapshot_path,
            min_compatibility=self.min_compatibility
            if file_config.min_compatibility is None
            else file_config.min_compatibility,
            min_confidence=self.min_confidence
            if file_config.min_confidence is None
            else file_config.min_confidence,
            max_workers=self.max_workers
            if file_config.max_workers is None
            else file_config.max_workers,
            top_fountains_limit=self.top_fountains_limit
            if file_config.top_fountains_limit is None
            else file_config.top_fountains_limit,
            coldness_weight=self.coldness_weight
            if file_config.coldness_weight is None
            else file_config.coldness_weight,
            pressure_weight=self.pressure_weight
            if file_config.pressure_weight is None
            else file_config.pressure_weight,
            experience_weight=self.experience_weight
            if file_config.experience_weight is None
            else file_config.experience_weight,
            yum_factor_weight=self.yum_factor_weight
            if file_config.yum_factor_weight is None
            else file_config.yum_factor_weight,
            correlation_weight=self.correlation_weight
            if file_config.correlation_weight is None
            else file_config.correlation_weight,
            similarity_weight=self.similarity_weight
            if file_config.similarity_weight is None
            else file_config.similarity_weight,
            confidence_saturation_count=self.confidence_saturation_count
            if file_config.confidence_saturation_count is None
            else file_config.confidence_saturation_count,
        )


def _parse_source_type(value: str) -> str:
    """Parse the data source selector."""
    source = value.strip().lower() or "api"
    if source not in SOURCE_TYPES:
        raise SourceTypeError(value)
    return source


def _parse_positive_int(value: str, *, env_name: str, default: int) -> int:
    """Parse a positive integer from an environment variable."""
    text = value.strip()
    if not text:
        return default
    try:
        parsed = int(text)
    except ValueError as exc:
        raise PositiveIntegerEnvVarError(env_name) from exc
    if parsed < 1:
        raise PositiveIntegerEnvVarError(env_name)
    return parsed


def _parse_unit_interval(value: str, *, env_name: str, default: float) -> float:
    """Parse a number in [0, 1] from an environment variable."""
    text = value.strip()
    if not text:
        return default
    try:
        parsed = float(text)
    except ValueError as exc:
        raise UnitIntervalEnvVarError(env_name) from exc
    if parsed < 0.0 or parsed > 1.0:
        raise UnitIntervalEnvVarError(env_name)
    return parsed
