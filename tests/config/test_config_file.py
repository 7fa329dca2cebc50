"""Tests for config-file schema parsing and fail-fast validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from hydrater.config_file import load_matching_config_file
from hydrater.exceptions import (
    ConfigFileNotFoundError,
    ConfigFileParseError,
    ConfigFileValidationError,
)
from tests.fakes import InMemoryFileSystem

CONFIG_PATH = Path("config/hydrater.toml")


def _fs_with(content: str) -> InMemoryFileSystem:
    fs = InMemoryFileSystem()
    fs.put(CONFIG_PATH, content.strip())
    return fs


def test_parses_valid_toml() -> None:
    fs = _fs_with(
        """
schema_version = 1

[matching]
source_type = " File "
supabase_url = "https://project.supabase.co/"
snapshot_path = "data/hydrater_snapshot.json"
min_compatibility = 0.35
min_confidence = 0.25
max_workers = 4
top_fountains_limit = 3
coldness_weight = 0.4
pressure_weight = 0.2
experience_weight = 0.2
yum_factor_weight = 0.2
correlation_weight = 0.5
similarity_weight = 0.5
confidence_saturation_count = 12
"""
    )

    parsed = load_matching_config_file(path=CONFIG_PATH, fs=fs)

    assert parsed.source_type == "file"
    assert parsed.supabase_url == "https://project.supabase.co"
    assert parsed.snapshot_path == "data/hydrater_snapshot.json"
    assert parsed.min_compatibility == 0.35
    assert parsed.min_confidence == 0.25
    assert parsed.max_workers == 4
    assert parsed.top_fountains_limit == 3
    assert parsed.coldness_weight == 0.4
    assert parsed.correlation_weight == 0.5
    assert parsed.confidence_saturation_count == 12


def test_empty_section_leaves_everything_unset() -> None:
    fs = _fs_with("schema_version = 1\n\n[matching]\n")

    parsed = load_matching_config_file(path=CONFIG_PATH, fs=fs)

    assert parsed.source_type is None
    assert parsed.max_workers is None


def test_missing_file() -> None:
    with pytest.raises(ConfigFileNotFoundError):
        load_matching_config_file(path=Path("missing.toml"), fs=InMemoryFileSystem())


def test_invalid_toml() -> None:
    fs = _fs_with("schema_version = \n[matching")

    with pytest.raises(ConfigFileParseError):
        load_matching_config_file(path=CONFIG_PATH, fs=fs)


@pytest.mark.parametrize(
    ("body", "location"),
    [
        ("schema_version = 2\n[matching]\n", "schema_version"),
        ("schema_version = 1\n[matching]\nunknown_key = 1\n", "matching.unknown_key"),
        ("schema_version = 1\n[matching]\nsource_type = \"s3\"\n", "matching.source_type"),
        ("schema_version = 1\n[matching]\nmax_workers = 0\n", "matching.max_workers"),
        ("schema_version = 1\n[matching]\nmin_confidence = 1.5\n", "matching.min_confidence"),
        ("schema_version = 1\n[matching]\nsnapshot_path = \" \"\n", "matching.snapshot_path"),
        ("schema_version = 1\n", "matching"),
    ],
)
def test_validation_errors_name_the_field(body: str, location: str) -> None:
    fs = _fs_with(body)

    with pytest.raises(ConfigFileValidationError) as exc_info:
        load_matching_config_file(path=CONFIG_PATH, fs=fs)

    assert location in str(exc_info.value)
