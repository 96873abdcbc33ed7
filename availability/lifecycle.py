"""Status transitions: recording them and deriving automatic expiry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping

from django.utils import timezone

from availability import store
from availability.status import Active, Inactive, State, Status, build_status

logger = logging.getLogger("availability.lifecycle")


@dataclass(frozen=True)
class Transition:
    member_id: str
    status: Status


def set_status(member_id: str, status: Status, now: datetime | None = None):
    """Persist ``status`` for the member and append it to the activity log.

    Overwriting an existing status is the normal case. The row upsert and the
    log append happen in the same transaction.
    """
    now = now or timezone.now()
    row = store.record_transition(member_id, status, now)
    logger.info("Status of %s set to %s %s", member_id, status.state, status.metadata)
    return row


def set_status_from_metadata(member_id: str, state: State | str, metadata: dict,
                             now: datetime | None = None):
    """Like ``set_status`` for callers holding a raw ``(state, metadata)`` pair.

    Raises:
        MalformedStatusError: the metadata does not fit the state.
    """
    return set_status(member_id, build_status(state, metadata), now=now)


def compute_expiry(snapshot: Mapping[str, Status], now: datetime) -> list[Transition]:
    """Transitions for every active status whose ``until`` lies before ``now``.

    Expired members become ``Inactive(since=now)``. Inactive and signed-off
    statuses never change here.
    """
    transitions = []
    for member_id, status in snapshot.items():
        if isinstance(status, Active) and status.is_expired(now):
            transitions.append(Transition(member_id=member_id, status=Inactive(since=now)))
    return transitions


def apply_transitions(transitions: Iterable[Transition], now: datetime | None = None) -> int:
    applied = 0
    for transition in transitions:
        set_status(transition.member_id, transition.status, now=now)
        applied += 1
    return applied
