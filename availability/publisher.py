"""Keeping the single live board message in sync with stored statuses."""

from __future__ import annotations

import logging
from datetime import datetime

from django.utils import timezone

from availability import store
from availability.board import Board, REPORT_WINDOW, render_board, render_weekly_report
from availability.gateway import BoardGateway, BoardMessageUnavailable, MessageRef
from availability.team import TeamConfig

logger = logging.getLogger("availability.publisher")


def current_board(team: TeamConfig, now: datetime | None = None) -> Board:
    """Render the board from the stored statuses."""
    now = now or timezone.now()
    return render_board(store.get_all_statuses(), team.roster, tz=team.time_zone, now=now)


def weekly_report(team: TeamConfig, now: datetime | None = None) -> Board:
    """Render the report for the trailing 7-day window ending at ``now``."""
    now = now or timezone.now()
    window_start = now - REPORT_WINDOW
    return render_weekly_report(store.get_log_since(window_start), team.roster, window_start, now=now,
                                tz=team.time_zone)


def publish(board: Board, gateway: BoardGateway, channel_id: str | None = None) -> MessageRef | None:
    """Edit the tracked board message in place, or post a new one.

    A tracked message that cannot be found or edited is replaced by a new post
    in ``channel_id`` (or the old message's channel when none is given). The
    pointer only moves after the new post succeeded.

    Returns the live message, or ``None`` when there is nothing tracked and no
    channel to post to.
    """
    pointer = store.get_board_pointer()
    if pointer is not None:
        try:
            gateway.fetch_message(pointer.channel_id, pointer.message_id)
            return gateway.edit_message(pointer.channel_id, pointer.message_id, board)
        except BoardMessageUnavailable as exc:
            logger.warning("Board message %s/%s unavailable (%s), posting a new one",
                           pointer.channel_id, pointer.message_id, exc.reason)

    target = channel_id or (pointer.channel_id if pointer else None)
    if not target:
        return None

    ref = gateway.post_message(target, board)
    store.replace_board_pointer(ref.channel_id, ref.message_id)
    logger.info("Board posted to %s/%s", ref.channel_id, ref.message_id)
    return ref


def refresh_board(team: TeamConfig, gateway: BoardGateway, now: datetime | None = None) -> MessageRef | None:
    """Re-render the board if one is being tracked.

    Used after status changes and sweeps; transport failures are logged and
    never reach the member who triggered the change.
    """
    if store.get_board_pointer() is None:
        return None
    try:
        return publish(current_board(team, now), gateway)
    except Exception:
        logger.exception("Could not refresh the status board")
        return None
