"""Filesystem fakes for tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import override

import pandas as pd

from hydrater.infrastructure.io.validation import IncomingDataError, validate_as
from hydrater.protocols import FileSystem
from tests.support.errors import FakeFileNotFoundError, FakeFileTypeError


def _empty_files() -> dict[str, object]:
    return {}


@dataclass
class InMemoryFileSystem(FileSystem):
    """In-memory filesystem for testing."""

    _files: dict[str, object] = field(default_factory=_empty_files)

    def put(self, path: Path | str, data: object) -> None:
        """Seed a file with any payload (JSON object, text or DataFrame)."""
        self._files[str(path)] = data

    def get(self, path: Path | str) -> object:
        key = str(path)
        if key not in self._files:
            raise FakeFileNotFoundError(key)
        return self._files[key]

    @override
    def read_json(self, path: Path) -> dict[str, object]:
        data = self.get(path)
        try:
            return validate_as(dict[str, object], data)
        except IncomingDataError as exc:
            raise FakeFileTypeError("dict", str(path)) from exc

    @override
    def read_text(self, path: Path) -> str:
        data = self.get(path)
        if isinstance(data, str):
            return data
        raise FakeFileTypeError("str", str(path))

    @override
    def write_csv(self, df: pd.DataFrame, path: Path) -> None:
        self._files[str(path)] = df.copy()

    @override
    def exists(self, path: Path) -> bool:
        return str(path) in self._files
