"""Tests for the local filesystem adapter."""

from pathlib import Path

import pandas as pd
import pytest

from hydrater.infrastructure import LocalFileSystem
from hydrater.infrastructure.io.filesystem import JsonObjectFileError


def test_write_csv_creates_parent_directories(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    path = tmp_path / "exports" / "matches.csv"

    fs.write_csv(pd.DataFrame({"user_id": ["bob"], "compatibility_score": [0.9]}), path)

    assert fs.exists(path)
    assert fs.read_text(path).splitlines() == ["user_id,compatibility_score", "bob,0.9"]


def test_read_json_object(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    path = tmp_path / "snapshot.json"
    path.write_text('{"users": [], "ratings": []}', encoding="utf-8")

    assert fs.read_json(path) == {"users": [], "ratings": []}


def test_read_json_rejects_arrays(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    path = tmp_path / "snapshot.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(JsonObjectFileError):
        fs.read_json(path)
