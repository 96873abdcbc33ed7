"""
Pytest fixtures for Rollcall tests.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from availability.board import Board
from availability.gateway import BoardMessageUnavailable, MessageRef
from availability.team import RosterMember, TeamConfig

NOW = datetime(2025, 9, 20, 12, 0, tzinfo=timezone.utc)

MANAGER_ID = "UMANAGER"


class FakeGateway:
    """In-memory board gateway recording every post and edit."""

    def __init__(self) -> None:
        self.messages: dict[tuple[str, str], Board] = {}
        self.posts: list[MessageRef] = []
        self.edits: list[MessageRef] = []
        self.fail_posts = False
        self._counter = 0

    def _check(self, channel_id: str, message_id: str) -> None:
        if (channel_id, message_id) not in self.messages:
            raise BoardMessageUnavailable(channel_id, message_id, "message_not_found")

    def fetch_message(self, channel_id, message_id):
        self._check(channel_id, message_id)
        return MessageRef(channel_id, message_id)

    def edit_message(self, channel_id, message_id, board):
        self._check(channel_id, message_id)
        self.messages[(channel_id, message_id)] = board
        ref = MessageRef(channel_id, message_id)
        self.edits.append(ref)
        return ref

    def post_message(self, channel_id, board):
        if self.fail_posts:
            raise RuntimeError("post failed")
        self._counter += 1
        ref = MessageRef(channel_id, f"17000000{self._counter:02d}.000100")
        self.messages[(ref.channel_id, ref.message_id)] = board
        self.posts.append(ref)
        return ref

    def delete(self, ref: MessageRef) -> None:
        self.messages.pop((ref.channel_id, ref.message_id), None)

    def live_board(self, ref: MessageRef) -> Board:
        return self.messages[(ref.channel_id, ref.message_id)]


# --- Fixtures ---

@pytest.fixture
def now():
    return NOW


@pytest.fixture
def roster():
    return (
        RosterMember("UALICE", "Alice"),
        RosterMember("UBOB", "Bob"),
        RosterMember("UCAROL", "Carol"),
        RosterMember("UDAVE", "Dave"),
    )


@pytest.fixture
def team(roster):
    """Team config in UTC so formatted times match the fixture instants."""
    return TeamConfig(manager_id=MANAGER_ID, roster=roster, time_zone=ZoneInfo("UTC"), sweep_interval=60)


@pytest.fixture
def gateway():
    return FakeGateway()
