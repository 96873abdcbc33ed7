"""Persistence operations for statuses, the activity log, and the board pointer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from django.db import transaction

from availability.models import ActivityLogEntry, BoardPointer, MemberStatus
from availability.status import State, Status, build_status

logger = logging.getLogger("availability.store")


@dataclass(frozen=True)
class ActivityEntry:
    member_id: str
    action: State
    timestamp: datetime


@dataclass(frozen=True)
class Pointer:
    channel_id: str
    message_id: str


def upsert_status(member_id: str, state: State, metadata: dict) -> MemberStatus:
    """Insert the member's status row, or overwrite state and metadata."""
    row, _ = MemberStatus.objects.update_or_create(
        member_id=member_id,
        defaults={"state": str(state), "metadata": metadata},
    )
    return row


def append_log(member_id: str, action: State, timestamp: datetime) -> ActivityLogEntry:
    return ActivityLogEntry.objects.create(member_id=member_id, action=str(action), timestamp=timestamp)


def record_transition(member_id: str, status: Status, timestamp: datetime) -> MemberStatus:
    """Upsert the status row and append its log entry in one transaction."""
    with transaction.atomic():
        row = upsert_status(member_id, status.state, status.metadata)
        append_log(member_id, status.state, timestamp)
    return row


def get_all_statuses() -> dict[str, Status]:
    """Return every stored status keyed by member id.

    Rows whose metadata no longer matches their state are skipped and logged.
    """
    snapshot: dict[str, Status] = {}
    for row in MemberStatus.objects.all():
        try:
            snapshot[row.member_id] = build_status(row.state, row.metadata)
        except ValueError:
            logger.exception("Skipping unreadable status row for %s", row.member_id)
    return snapshot


def get_status(member_id: str) -> Status | None:
    row = MemberStatus.objects.filter(member_id=member_id).first()
    if row is None:
        return None
    return build_status(row.state, row.metadata)


def get_log_since(timestamp: datetime) -> list[ActivityEntry]:
    """Log entries recorded at or after ``timestamp``, oldest first."""
    rows = ActivityLogEntry.objects.filter(timestamp__gte=timestamp).order_by("timestamp", "id")
    return [ActivityEntry(member_id=r.member_id, action=State(r.action), timestamp=r.timestamp) for r in rows]


def get_board_pointer() -> Pointer | None:
    row = BoardPointer.objects.order_by("-id").first()
    if row is None:
        return None
    return Pointer(channel_id=row.channel_id, message_id=row.message_id)


def replace_board_pointer(channel_id: str, message_id: str) -> Pointer:
    """Make ``channel_id``/``message_id`` the only tracked board message."""
    with transaction.atomic():
        BoardPointer.objects.all().delete()
        BoardPointer.objects.create(channel_id=channel_id, message_id=message_id)
    return Pointer(channel_id=channel_id, message_id=message_id)
