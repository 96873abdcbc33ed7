"""Member availability states and their payloads.

A status is one of three frozen variants, each carrying exactly the metadata
its state needs:

- ``Active(until)``
- ``Inactive(since)``
- ``SignedOff(until, reason)``

Rows store ``(state, metadata)`` pairs; ``build_status`` and ``Status.metadata``
convert between the two shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Union


class State(str, Enum):
    """Closed set of availability states."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SIGNED_OFF = "signed-off"

    @property
    def label(self) -> str:
        return {
            State.ACTIVE: "Active",
            State.INACTIVE: "Inactive",
            State.SIGNED_OFF: "Signed off",
        }[self]

    def __str__(self):
        return self.value


class MalformedStatusError(ValueError):
    """Raised when a (state, metadata) pair does not describe a valid status."""


def _require_aware(name: str, value: Any) -> None:
    if not isinstance(value, datetime):
        raise MalformedStatusError(f"{name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise MalformedStatusError(f"{name} must be timezone-aware")


@dataclass(frozen=True)
class Active:
    until: datetime

    state: ClassVar[State] = State.ACTIVE

    def __post_init__(self) -> None:
        _require_aware("until", self.until)

    @property
    def metadata(self) -> dict[str, str]:
        return {"until": self.until.isoformat()}

    def is_expired(self, now: datetime) -> bool:
        return self.until < now


@dataclass(frozen=True)
class Inactive:
    since: datetime

    state: ClassVar[State] = State.INACTIVE

    def __post_init__(self) -> None:
        _require_aware("since", self.since)

    @property
    def metadata(self) -> dict[str, str]:
        return {"since": self.since.isoformat()}


@dataclass(frozen=True)
class SignedOff:
    until: datetime
    reason: str = ""

    state: ClassVar[State] = State.SIGNED_OFF

    def __post_init__(self) -> None:
        _require_aware("until", self.until)
        if self.reason is None:
            object.__setattr__(self, "reason", "")

    @property
    def metadata(self) -> dict[str, str]:
        return {"until": self.until.isoformat(), "reason": self.reason}


Status = Union[Active, Inactive, SignedOff]


def _timestamp(metadata: dict, key: str) -> datetime:
    raw = metadata.get(key)
    if raw is None:
        raise MalformedStatusError(f"missing '{key}'")
    if isinstance(raw, datetime):
        return raw
    try:
        return datetime.fromisoformat(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedStatusError(f"'{key}' is not an ISO-8601 timestamp: {raw!r}") from exc


def build_status(state: State | str, metadata: dict | None) -> Status:
    """Build the status variant for a stored ``(state, metadata)`` pair.

    Raises:
        MalformedStatusError: unknown state, or metadata missing a field the
            state requires.
    """
    try:
        state = State(state)
    except ValueError as exc:
        raise MalformedStatusError(f"unknown state {state!r}") from exc

    metadata = metadata or {}
    if state is State.ACTIVE:
        return Active(until=_timestamp(metadata, "until"))
    if state is State.INACTIVE:
        return Inactive(since=_timestamp(metadata, "since"))
    return SignedOff(until=_timestamp(metadata, "until"), reason=metadata.get("reason") or "")
