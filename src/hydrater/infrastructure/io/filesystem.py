"""Filesystem implementation for infrastructure.

Usage example:
    from pathlib import Path

    import pandas as pd

    from hydrater.infrastructure.io.filesystem import LocalFileSystem

    fs = LocalFileSystem()
    fs.write_csv(pd.DataFrame({"user_id": ["u-1"]}), Path("data/matches.csv"))
"""

from __future__ import annotations

from pathlib import Path
from typing import override

import pandas as pd

from ...protocols import FileSystem
from .validation import IncomingDataError, validate_json_as


class JsonObjectFileError(RuntimeError):
    """Raised when a JSON file does not hold an object."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"JSON file must contain an object: {path}")


class LocalFileSystem(FileSystem):
    """Local filesystem implementation."""

    @override
    def read_json(self, path: Path) -> dict[str, object]:
        payload = path.read_text(encoding="utf-8")
        try:
            return validate_json_as(dict[str, object], payload)
        except IncomingDataError as exc:
            raise JsonObjectFileError(path) from exc

    @override
    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    @override
    def write_csv(self, df: pd.DataFrame, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False)

    @override
    def exists(self, path: Path) -> bool:
        return path.exists()
