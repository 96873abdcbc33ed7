"""Interaction handlers: what happens when a member picks a status, submits a
modal, or the manager runs the slash command.

Handlers know nothing about Slack payloads. They take the team config, a board
gateway and plain values, and return a ``Reply`` for the transport to deliver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from django.utils import timezone

from availability.board import Board, format_timestamp
from availability.gateway import BoardGateway
from availability.lifecycle import set_status
from availability.publisher import current_board, publish, refresh_board, weekly_report
from availability.status import Active, Inactive, SignedOff, State
from availability.team import NotAuthorizedError, TeamConfig
from availability.timeparse import parse_when
from integrations.slack_format import format_usage

logger = logging.getLogger("availability.handlers")

DENIED_TEXT = ":no_entry: Only the team manager can do that."
INVALID_TIME_TEXT = "Invalid date/time. Try something like 23:15, tomorrow 18:00 or 20.09.2025 23:15."
INVALID_DATE_TEXT = "Invalid date. Try something like 20.09.2025."


class InvalidTimeInput(ValueError):
    """Raised when a member's time input cannot be understood."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class Reply:
    text: str
    board: Board | None = None


def _now(now: datetime | None) -> datetime:
    return now or timezone.now()


def _parse_input(team: TeamConfig, text: str, now: datetime, error: str) -> datetime:
    when = parse_when(text, now.astimezone(team.time_zone))
    if when is None:
        raise InvalidTimeInput(error)
    return when


def parse_active_until(team: TeamConfig, text: str, now: datetime | None = None) -> datetime:
    """Validate the "active until" input without storing anything."""
    return _parse_input(team, text, _now(now), INVALID_TIME_TEXT)


def parse_signed_off_until(team: TeamConfig, text: str, now: datetime | None = None) -> datetime:
    """Validate the sign-off date without storing anything."""
    return _parse_input(team, text, _now(now), INVALID_DATE_TEXT)


# ---------------------------------------------------------------------------
# Member status changes
# ---------------------------------------------------------------------------


def choose_status(team: TeamConfig, gateway: BoardGateway, user_id: str, choice: str,
                  now: datetime | None = None) -> Reply | None:
    """Handle a pick from the board's status menu.

    Inactive takes effect immediately. Active and signed-off need a time, so
    ``None`` is returned and the transport should open the matching modal.
    """
    state = State(choice)
    if state is not State.INACTIVE:
        return None

    now = _now(now)
    set_status(user_id, Inactive(since=now), now=now)
    refresh_board(team, gateway, now=now)
    return Reply(":white_check_mark: You are now inactive.")


def submit_active(team: TeamConfig, gateway: BoardGateway, user_id: str, until_text: str,
                  now: datetime | None = None) -> Reply:
    """Handle the "active until" modal.

    Raises:
        InvalidTimeInput: ``until_text`` is not a recognised time; nothing is stored.
    """
    now = _now(now)
    until = parse_active_until(team, until_text, now)
    set_status(user_id, Active(until=until), now=now)
    refresh_board(team, gateway, now=now)
    return Reply(f":white_check_mark: You are active until {format_timestamp(until, team.time_zone)}.")


def submit_signed_off(team: TeamConfig, gateway: BoardGateway, user_id: str, until_text: str,
                      reason: str = "", now: datetime | None = None) -> Reply:
    """Handle the sign-off modal.

    Raises:
        InvalidTimeInput: ``until_text`` is not a recognised date; nothing is stored.
    """
    now = _now(now)
    until = parse_signed_off_until(team, until_text, now)
    reason = (reason or "").strip()
    set_status(user_id, SignedOff(until=until, reason=reason), now=now)
    refresh_board(team, gateway, now=now)
    text = f":white_check_mark: Signed off until {format_timestamp(until, team.time_zone)}"
    if reason:
        text += f" (reason: {reason})"
    return Reply(text + ".")


# ---------------------------------------------------------------------------
# Manager commands
# ---------------------------------------------------------------------------


def command_board(team: TeamConfig, gateway: BoardGateway, user_id: str, channel_id: str,
                  now: datetime | None = None) -> Reply:
    """Post the board in ``channel_id``, or update the one already tracked."""
    team.require_manager(user_id)
    ref = publish(current_board(team, _now(now)), gateway, channel_id=channel_id)
    if ref is None:
        return Reply(":warning: Run this command in the channel the board should live in.")
    logger.info("Board published by %s at %s/%s", user_id, ref.channel_id, ref.message_id)
    return Reply(":white_check_mark: Status board posted/updated.")


def command_weekly(team: TeamConfig, gateway: BoardGateway, user_id: str, channel_id: str,
                   now: datetime | None = None) -> Reply:
    """Weekly activity report, meant for the requester only."""
    team.require_manager(user_id)
    report = weekly_report(team, _now(now))
    return Reply(report.title, board=report)


COMMAND_REGISTRY: dict[str, Callable[..., Reply]] = {
    "board": command_board,
    "weekly": command_weekly,
}


def dispatch_command(team: TeamConfig, gateway: BoardGateway, user_id: str, channel_id: str,
                     text: str, command_name: str, now: datetime | None = None) -> Reply:
    """Route the slash command text to its sub-action."""
    words = (text or "").strip().lower().split()
    handler = COMMAND_REGISTRY.get(words[0]) if words else None
    if handler is None:
        return Reply(format_usage(command_name))

    try:
        return handler(team, gateway, user_id, channel_id, now=now)
    except NotAuthorizedError:
        logger.warning("Denied %s %s for %s", command_name, words[0], user_id)
        return Reply(DENIED_TEXT)
