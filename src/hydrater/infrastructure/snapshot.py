"""Rating store and user directory backed by a local JSON snapshot.

Snapshot layout:
    {
        "users": [{"id": "u-1", "display_name": "Ada", "total_ratings": 3, "badges": []}],
        "ratings": [
            {"user_id": "u-1", "fountain_id": "f-1", "coldness": 5, "pressure": 4,
             "experience": 4, "yum_factor": 3}
        ]
    }
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import override

from ..domain.matching import CandidateProfile
from ..domain.ratings import UserRatingSet, build_rating_set
from ..exceptions import (
    DirectoryFetchError,
    InvalidRatingValueError,
    RatingFetchError,
    SnapshotNotFoundError,
)
from ..io_contracts import RatingRowIO, UserRowIO
from ..observability import get_logger
from ..protocols import FileSystem, RatingStore, UserDirectory
from .io.validation import IncomingDataError, parse_snapshot
from .supabase import profile_from_row

logger = get_logger("hydrater.infrastructure.snapshot")


class JsonSnapshotStore(RatingStore, UserDirectory):
    """Serves ratings and profiles from a snapshot file, loaded once on first use."""

    def __init__(self, *, path: Path, fs: FileSystem) -> None:
        self.path = Path(path)
        self.fs = fs
        self._users: list[UserRowIO] | None = None
        self._ratings: dict[str, list[RatingRowIO]] = {}
        self._lock = threading.Lock()

    def _load(self) -> tuple[list[UserRowIO], dict[str, list[RatingRowIO]]]:
        with self._lock:
            if self._users is None:
                if not self.fs.exists(self.path):
                    raise SnapshotNotFoundError(str(self.path))
                users, ratings = parse_snapshot(self.fs.read_json(self.path))
                logger.info(
                    "Loaded snapshot %s: %s users, %s rated users",
                    self.path,
                    len(users),
                    len(ratings),
                )
                self._users = users
                self._ratings = ratings
            return self._users, self._ratings

    @override
    def get_ratings_for_user(self, user_id: str) -> UserRatingSet:
        try:
            _, ratings = self._load()
            return build_rating_set(ratings.get(user_id, []))
        except (IncomingDataError, InvalidRatingValueError) as exc:
            raise RatingFetchError(user_id, str(exc)) from exc

    @override
    def get_candidate_pool(self, exclude_user_id: str) -> list[CandidateProfile]:
        try:
            users, ratings = self._load()
        except IncomingDataError as exc:
            raise DirectoryFetchError(str(exc)) from exc
        return [
            profile_from_row(row)
            for row in users
            if row["id"] != exclude_user_id
            and (row["total_ratings"] > 0 or bool(ratings.get(row["id"])))
        ]

    @override
    def get_profile(self, user_id: str) -> CandidateProfile | None:
        try:
            users, _ = self._load()
        except IncomingDataError as exc:
            raise DirectoryFetchError(str(exc)) from exc
        for row in users:
            if row["id"] == user_id:
                return profile_from_row(row)
        return None
