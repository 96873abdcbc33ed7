"""Slack Block Kit message formatting helpers."""

from __future__ import annotations

from datetime import timezone

from availability.board import Board
from availability.status import State

STATUS_SELECT_ACTION_ID = "status_select"

ACTIVE_MODAL_ID = "status_active_modal"
SIGNED_OFF_MODAL_ID = "status_signed_off_modal"

UNTIL_BLOCK_ID = "until_block"
UNTIL_ACTION_ID = "until_input"
REASON_BLOCK_ID = "reason_block"
REASON_ACTION_ID = "reason_input"

STATUS_OPTIONS = [
    {
        "text": {"type": "plain_text", "text": ":large_green_circle: Active", "emoji": True},
        "description": {"type": "plain_text", "text": "I'm looking after the server"},
        "value": State.ACTIVE.value,
    },
    {
        "text": {"type": "plain_text", "text": ":white_circle: Inactive", "emoji": True},
        "description": {"type": "plain_text", "text": "I'm busy"},
        "value": State.INACTIVE.value,
    },
    {
        "text": {"type": "plain_text", "text": ":palm_tree: Sign off", "emoji": True},
        "description": {"type": "plain_text", "text": "Away for a longer time"},
        "value": State.SIGNED_OFF.value,
    },
]


def _field_blocks(board: Board) -> list[dict]:
    return [
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": f"*{f.name}*\n{f.value}"},
        }
        for f in board.fields
    ]


def _footer(board: Board) -> list[dict]:
    if board.generated_at is None:
        return []
    stamp = board.generated_at.astimezone(board.time_zone or timezone.utc).strftime("%Y-%m-%d %H:%M %Z")
    return [
        {
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": f":robot_face: Rollcall  |  {stamp}"}],
        },
    ]


def board_fallback_text(board: Board) -> str:
    """Plain-text rendering used for notifications and clients without blocks."""
    lines = [board.title, board.description, ""]
    for f in board.fields:
        lines.append(f"{f.name}: {f.value.replace(chr(10), ' / ')}")
    return "\n".join(lines).strip()


def format_board(board: Board) -> list[dict]:
    """Format the status board with the status select menu attached.

    Args:
        board: The rendered board.

    Returns:
        A list of Block Kit block dicts.
    """
    blocks: list[dict] = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": board.title, "emoji": True},
        },
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": board.description},
        },
        {"type": "divider"},
    ]
    blocks.extend(_field_blocks(board))
    blocks.append({"type": "divider"})
    blocks.append({
        "type": "actions",
        "elements": [
            {
                "type": "static_select",
                "action_id": STATUS_SELECT_ACTION_ID,
                "placeholder": {"type": "plain_text", "text": "Choose your status"},
                "options": STATUS_OPTIONS,
            },
        ],
    })
    blocks.extend(_footer(board))
    return blocks


def format_report(board: Board) -> list[dict]:
    """Format the weekly report (no interactive elements).

    Args:
        board: The rendered report.

    Returns:
        A list of Block Kit block dicts.
    """
    blocks: list[dict] = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": board.title, "emoji": True},
        },
        {
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": board.description}],
        },
    ]
    for block in _field_blocks(board):
        blocks.append({"type": "divider"})
        blocks.append(block)
    blocks.extend(_footer(board))
    return blocks


def format_usage(command: str) -> str:
    return (
        f"*Usage:*\n"
        f"`{command} board`: post or refresh the team status board in this channel\n"
        f"`{command} weekly`: show the weekly activity report (only visible to you)"
    )


def build_active_modal(channel_id: str = "") -> dict:
    """Modal asking an active member until when they are available."""
    return {
        "type": "modal",
        "callback_id": ACTIVE_MODAL_ID,
        "private_metadata": channel_id,
        "title": {"type": "plain_text", "text": "Active until when?"},
        "submit": {"type": "plain_text", "text": "Save"},
        "close": {"type": "plain_text", "text": "Cancel"},
        "blocks": [
            {
                "type": "input",
                "block_id": UNTIL_BLOCK_ID,
                "label": {"type": "plain_text", "text": "Until"},
                "hint": {"type": "plain_text", "text": "e.g. 23:15, tomorrow 18:00 or 20.09.2025 23:15"},
                "element": {
                    "type": "plain_text_input",
                    "action_id": UNTIL_ACTION_ID,
                    "placeholder": {"type": "plain_text", "text": "23:15"},
                },
            },
        ],
    }


def build_signed_off_modal(channel_id: str = "") -> dict:
    """Modal for signing off until a date, with an optional reason."""
    return {
        "type": "modal",
        "callback_id": SIGNED_OFF_MODAL_ID,
        "private_metadata": channel_id,
        "title": {"type": "plain_text", "text": "Sign off"},
        "submit": {"type": "plain_text", "text": "Sign off"},
        "close": {"type": "plain_text", "text": "Cancel"},
        "blocks": [
            {
                "type": "input",
                "block_id": UNTIL_BLOCK_ID,
                "label": {"type": "plain_text", "text": "Until"},
                "hint": {"type": "plain_text", "text": "e.g. 20.09.2025"},
                "element": {
                    "type": "plain_text_input",
                    "action_id": UNTIL_ACTION_ID,
                    "placeholder": {"type": "plain_text", "text": "20.09.2025"},
                },
            },
            {
                "type": "input",
                "block_id": REASON_BLOCK_ID,
                "optional": True,
                "label": {"type": "plain_text", "text": "Reason"},
                "element": {
                    "type": "plain_text_input",
                    "action_id": REASON_ACTION_ID,
                    "multiline": True,
                },
            },
        ],
    }


def modal_value(view: dict, block_id: str, action_id: str) -> str:
    """Read a plain-text input value out of a submitted modal view."""
    values = view.get("state", {}).get("values", {})
    value = values.get(block_id, {}).get(action_id, {}).get("value")
    return (value or "").strip()
