"""Pytest fixtures shared across the suite.

All tests are network-isolated - socket connections are blocked by default.
"""

from __future__ import annotations

import socket
from collections.abc import Iterator

import pytest

from tests.fakes import InMemoryRatingStore, InMemoryUserDirectory
from tests.support.errors import NetworkIsolationError
from tests.support.ratings import make_profile, make_rating_set

# =============================================================================
# Network Isolation - Block all socket connections in tests
# =============================================================================


def _blocked_socket_connect(self: socket.socket, *args: object, **kwargs: object) -> None:
    """Raise an error if any test tries to make a real network connection."""
    _ = (self, kwargs)
    raise NetworkIsolationError(str(args))


@pytest.fixture(autouse=True)
def block_network_access(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Block all network access in tests.

    Tests that need HTTP should use FakeJsonApiClient or a MagicMock session.
    """
    monkeypatch.setattr(socket.socket, "connect", _blocked_socket_connect)
    yield


@pytest.fixture
def campus_ratings() -> InMemoryRatingStore:
    """Four users with overlapping fountain ratings.

    - alice and bob rate identically on the shared fountains
    - carol rates the opposite way to alice
    - dave has no fountains in common with alice
    """
    return InMemoryRatingStore(
        ratings={
            "alice": make_rating_set(
                {
                    "f-library": (5, 5, 5, 5),
                    "f-gym": (1, 1, 1, 1),
                    "f-union": (4, 4, 3, 3),
                }
            ),
            "bob": make_rating_set(
                {
                    "f-library": (5, 5, 5, 5),
                    "f-gym": (1, 1, 1, 1),
                    "f-union": (4, 4, 3, 3),
                }
            ),
            "carol": make_rating_set(
                {
                    "f-library": (1, 1, 1, 1),
                    "f-gym": (5, 5, 5, 5),
                    "f-union": (2, 2, 3, 3),
                }
            ),
            "dave": make_rating_set({"f-quad": (3, 3, 3, 3)}),
        }
    )


@pytest.fixture
def campus_directory() -> InMemoryUserDirectory:
    """Profiles for the users in ``campus_ratings``."""
    return InMemoryUserDirectory(
        profiles=[
            make_profile("alice", display_name="Alice", total_ratings=3),
            make_profile("bob", display_name="Bob", total_ratings=3),
            make_profile("carol", display_name="Carol", total_ratings=3),
            make_profile("dave", display_name="Dave", total_ratings=1),
        ]
    )
