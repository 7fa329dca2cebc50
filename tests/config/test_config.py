"""Tests for MatchingConfig behaviour."""

from collections.abc import Callable

import pytest

import hydrater.config as config_module
from hydrater.config import (
    MatchingConfig,
    PositiveIntegerEnvVarError,
    UnitIntervalEnvVarError,
)
from hydrater.config_file import MatchingConfigFile
from hydrater.domain.compatibility import DEFAULT_COMPATIBILITY_WEIGHTS
from hydrater.domain.matching import DEFAULT_MAX_WORKERS, MatchThresholds
from hydrater.exceptions import DimensionWeightsError, SourceTypeError

type EnvSetter = Callable[[dict[str, str]], None]


@pytest.fixture
def set_env(monkeypatch: pytest.MonkeyPatch) -> EnvSetter:
    """Replace the process environment and disable .env discovery."""

    def apply(env: dict[str, str]) -> None:
        def fake_getenv(key: str, default: str = "") -> str:
            return env.get(key, default)

        def fake_load_dotenv(dotenv_path: str | None = None) -> bool:
            _ = dotenv_path
            return True

        monkeypatch.setattr(config_module.os, "getenv", fake_getenv)
        monkeypatch.setattr(config_module, "load_dotenv", fake_load_dotenv)

    return apply


def test_defaults_match_scoring_constants() -> None:
    config = MatchingConfig()

    assert config.thresholds == MatchThresholds(min_compatibility=0.3, min_confidence=0.2)
    assert config.compatibility_weights == DEFAULT_COMPATIBILITY_WEIGHTS
    assert config.max_workers == 8
    assert config.top_fountains_limit == 5


def test_from_env_reads_supabase_and_matching_variables(set_env: EnvSetter) -> None:
    set_env(
        {
            "SUPABASE_URL": " https://project.supabase.co/ ",
            "SUPABASE_KEY": " anon-key ",
            "HYDRATER_SOURCE": "FILE",
            "HYDRATER_SNAPSHOT_PATH": "data/campus.json",
            "HYDRATER_MIN_COMPATIBILITY": "0.45",
            "HYDRATER_MIN_CONFIDENCE": "0.1",
            "HYDRATER_MAX_WORKERS": "3",
            "HYDRATER_MAX_RPM": "120",
            "HYDRATER_CIRCUIT_BREAKER_THRESHOLD": "2",
            "HYDRATER_CONFIG_FILE": "config/hydrater.toml",
        }
    )

    config = MatchingConfig.from_env()

    assert config.supabase_url == "https://project.supabase.co"
    assert config.supabase_key == "anon-key"
    assert config.source_type == "file"
    assert config.snapshot_path == "data/campus.json"
    assert config.min_compatibility == 0.45
    assert config.min_confidence == 0.1
    assert config.max_workers == 3
    assert config.max_rpm == 120
    assert config.circuit_breaker_threshold == 2
    assert config.config_file_path == "config/hydrater.toml"


def test_from_env_defaults(set_env: EnvSetter) -> None:
    set_env({})

    config = MatchingConfig.from_env()

    assert config == MatchingConfig()


def test_max_workers_defaults_share_the_match_finder_constant(set_env: EnvSetter) -> None:
    set_env({})

    assert DEFAULT_MAX_WORKERS == 8
    assert MatchingConfig().max_workers == DEFAULT_MAX_WORKERS
    assert MatchingConfig.from_env().max_workers == DEFAULT_MAX_WORKERS


def test_from_env_rejects_unknown_source(set_env: EnvSetter) -> None:
    set_env({"HYDRATER_SOURCE": "postgres"})

    with pytest.raises(SourceTypeError):
        MatchingConfig.from_env()


@pytest.mark.parametrize("value", ["0", "-2", "many"])
def test_from_env_rejects_invalid_max_workers(set_env: EnvSetter, value: str) -> None:
    set_env({"HYDRATER_MAX_WORKERS": value})

    with pytest.raises(PositiveIntegerEnvVarError):
        MatchingConfig.from_env()


@pytest.mark.parametrize("value", ["1.5", "-0.1", "high"])
def test_from_env_rejects_thresholds_outside_unit_interval(
    set_env: EnvSetter, value: str
) -> None:
    set_env({"HYDRATER_MIN_CONFIDENCE": value})

    with pytest.raises(UnitIntervalEnvVarError):
        MatchingConfig.from_env()


def test_with_overrides_preserves_other_fields() -> None:
    base = MatchingConfig(supabase_url="https://project.supabase.co", max_rpm=99)

    updated = base.with_overrides(min_compatibility=0.5, max_workers=2, source_type="file")

    assert updated.min_compatibility == 0.5
    assert updated.max_workers == 2
    assert updated.source_type == "file"
    assert updated.min_confidence == base.min_confidence
    assert updated.supabase_url == base.supabase_url
    assert updated.max_rpm == 99


def test_with_overrides_without_values_is_identity() -> None:
    base = MatchingConfig(min_confidence=0.4)

    assert base.with_overrides() == base


def test_with_file_overrides_applies_only_set_values() -> None:
    base = MatchingConfig(supabase_key="secret", max_workers=4)

    updated = base.with_file_overrides(
        MatchingConfigFile(
            source_type="file",
            min_compatibility=0.5,
            top_fountains_limit=3,
            coldness_weight=0.25,
            yum_factor_weight=0.25,
        )
    )

    assert updated.source_type == "file"
    assert updated.min_compatibility == 0.5
    assert updated.top_fountains_limit == 3
    assert updated.max_workers == 4
    assert updated.supabase_key == "secret"
    assert updated.compatibility_weights.dimensions.values == (0.25, 0.25, 0.25, 0.25)


def test_invalid_weights_fail_when_scoring_weights_are_built() -> None:
    config = MatchingConfig(coldness_weight=0.9)

    with pytest.raises(DimensionWeightsError):
        _ = config.compatibility_weights
