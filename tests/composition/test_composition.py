"""Tests for CLI composition root wiring."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import override

import pytest

from hydrater import composition
from hydrater.config import MatchingConfig
from hydrater.exceptions import MissingSupabaseCredentialsError
from hydrater.infrastructure import (
    JsonSnapshotStore,
    LocalFileSystem,
    SupabaseRatingStore,
    SupabaseUserDirectory,
)
from hydrater.protocols import JsonApiClient


class DummyJsonApiClient(JsonApiClient):
    """JSON client stub for composition tests."""

    @override
    def get_rows(self, url: str, params: Mapping[str, str]) -> list[dict[str, object]]:
        return []


def test_file_source_uses_snapshot_for_both_roles() -> None:
    config = MatchingConfig(source_type="file", snapshot_path="data/campus.json")

    deps = composition.build_cli_dependencies(config=config)

    assert isinstance(deps.fs, LocalFileSystem)
    assert isinstance(deps.rating_store, JsonSnapshotStore)
    assert deps.directory is deps.rating_store
    assert deps.rating_store.path == Path("data/campus.json")


def test_api_source_requires_credentials() -> None:
    with pytest.raises(MissingSupabaseCredentialsError):
        composition.build_cli_dependencies(config=MatchingConfig(source_type="api"))


def test_api_source_builds_supabase_stores(monkeypatch: pytest.MonkeyPatch) -> None:
    client = DummyJsonApiClient()
    captured: dict[str, object] = {}

    def fake_build_supabase_client(**kwargs: object) -> JsonApiClient:
        captured.update(kwargs)
        return client

    monkeypatch.setattr(composition, "build_supabase_client", fake_build_supabase_client)
    config = MatchingConfig(
        supabase_url="https://project.supabase.co",
        supabase_key="anon-key",
        max_rpm=120,
        max_retries=5,
        timeout_seconds=12.0,
    )

    deps = composition.build_cli_dependencies(config=config)

    assert isinstance(deps.rating_store, SupabaseRatingStore)
    assert isinstance(deps.directory, SupabaseUserDirectory)
    assert deps.rating_store.client is client
    assert deps.rating_store.url == "https://project.supabase.co/rest/v1/ratings"
    assert deps.directory.url == "https://project.supabase.co/rest/v1/users"
    assert captured["api_key"] == "anon-key"
    assert captured["max_rpm"] == 120
    assert captured["max_retries"] == 5
    assert captured["timeout_seconds"] == 12.0
