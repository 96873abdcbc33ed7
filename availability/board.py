"""Rendering of the status board and the weekly activity report.

Both renderers are pure: they take a snapshot (or log entries) plus the roster
and return a ``Board`` that a transport turns into a message.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, Mapping, Sequence

from availability.status import Active, Inactive, SignedOff, State, Status
from availability.store import ActivityEntry
from availability.team import RosterMember

BOARD_TITLE = "Team Status"
BOARD_DESCRIPTION = (
    "Please keep your status up to date. "
    "Repeated inactivity means a talk with the team lead."
)
REPORT_TITLE = ":bar_chart: Weekly Report"
REPORT_DESCRIPTION = "Status activity over the last 7 days"
REPORT_WINDOW = timedelta(days=7)

NO_STATUS = "—"
TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M"


@dataclass(frozen=True)
class BoardField:
    name: str
    value: str


@dataclass(frozen=True)
class Board:
    title: str
    description: str
    fields: tuple[BoardField, ...] = ()
    generated_at: datetime | None = None
    time_zone: tzinfo | None = None


@dataclass
class ActivityTally:
    active: int = 0
    inactive: int = 0
    signed_off: int = 0

    @property
    def total(self) -> int:
        return self.active + self.inactive + self.signed_off

    @property
    def activity_rate(self) -> int:
        """Share of active transitions in percent, rounded half up; 0 with no entries."""
        if not self.total:
            return 0
        return math.floor(self.active * 100 / self.total + 0.5)

    def add(self, action: State) -> None:
        if action is State.ACTIVE:
            self.active += 1
        elif action is State.INACTIVE:
            self.inactive += 1
        else:
            self.signed_off += 1


def format_timestamp(value: datetime, tz: tzinfo | None = None) -> str:
    if tz is not None:
        value = value.astimezone(tz)
    return value.strftime(TIMESTAMP_FORMAT)


def describe_status(status: Status | None, tz: tzinfo | None = None) -> str:
    """Board text for a single member."""
    if status is None:
        return NO_STATUS
    if isinstance(status, Active):
        return f"Active until {format_timestamp(status.until, tz)}"
    if isinstance(status, Inactive):
        return f"Inactive since {format_timestamp(status.since, tz)}"
    if isinstance(status, SignedOff):
        text = f"Signed off until {format_timestamp(status.until, tz)}"
        if status.reason:
            text += f"\nReason: {status.reason}"
        return text
    raise TypeError(f"Unknown status type: {type(status).__name__}")


def render_board(snapshot: Mapping[str, Status], roster: Sequence[RosterMember],
                 tz: tzinfo | None = None, now: datetime | None = None) -> Board:
    """One field per roster member, in roster order."""
    fields = tuple(
        BoardField(name=member.display_name, value=describe_status(snapshot.get(member.member_id), tz))
        for member in roster
    )
    return Board(title=BOARD_TITLE, description=BOARD_DESCRIPTION, fields=fields, generated_at=now,
                 time_zone=tz)


def tally_activity(entries: Iterable[ActivityEntry], window_start: datetime) -> dict[str, ActivityTally]:
    tallies: dict[str, ActivityTally] = {}
    for entry in entries:
        if entry.timestamp < window_start:
            continue
        tallies.setdefault(entry.member_id, ActivityTally()).add(entry.action)
    return tallies


def describe_tally(tally: ActivityTally) -> str:
    return (
        f"Active: {tally.active}x\n"
        f"Inactive: {tally.inactive}x\n"
        f"Signed off: {tally.signed_off}x\n"
        f"Activity rate: {tally.activity_rate}%"
    )


def render_weekly_report(entries: Iterable[ActivityEntry], roster: Sequence[RosterMember],
                         window_start: datetime, now: datetime | None = None,
                         tz: tzinfo | None = None) -> Board:
    """Per-member transition counts since ``window_start``, in roster order."""
    tallies = tally_activity(entries, window_start)
    fields = tuple(
        BoardField(name=member.display_name, value=describe_tally(tallies.get(member.member_id, ActivityTally())))
        for member in roster
    )
    return Board(title=REPORT_TITLE, description=REPORT_DESCRIPTION, fields=fields, generated_at=now,
                 time_zone=tz)
