"""Message transport for the status board.

``BoardGateway`` is what the publisher needs from a chat platform;
``SlackBoardGateway`` implements it over the Slack Web API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from availability.board import Board
from integrations.slack_format import board_fallback_text, format_board

logger = logging.getLogger("availability.gateway")

# Slack errors meaning "that message is gone or no longer ours to edit".
UNAVAILABLE_ERRORS = {
    "message_not_found",
    "channel_not_found",
    "not_in_channel",
    "is_archived",
    "cant_update_message",
    "edit_window_closed",
    "access_denied",
}


class BoardMessageUnavailable(Exception):
    """Raised when the tracked board message cannot be fetched or edited."""

    def __init__(self, channel_id: str, message_id: str, reason: str = "") -> None:
        self.channel_id = channel_id
        self.message_id = message_id
        self.reason = reason
        super().__init__(f"Board message {channel_id}/{message_id} unavailable: {reason}")


@dataclass(frozen=True)
class MessageRef:
    channel_id: str
    message_id: str


class BoardGateway(Protocol):
    def fetch_message(self, channel_id: str, message_id: str) -> MessageRef: ...

    def edit_message(self, channel_id: str, message_id: str, board: Board) -> MessageRef: ...

    def post_message(self, channel_id: str, board: Board) -> MessageRef: ...


class SlackBoardGateway:
    """Board gateway backed by a Slack ``WebClient``."""

    def __init__(self, client: WebClient) -> None:
        self.client = client

    def fetch_message(self, channel_id: str, message_id: str) -> MessageRef:
        try:
            resp = self.client.conversations_history(
                channel=channel_id, latest=message_id, inclusive=True, limit=1,
            )
        except SlackApiError as exc:
            error = exc.response.get("error", "")
            if error in UNAVAILABLE_ERRORS:
                raise BoardMessageUnavailable(channel_id, message_id, error) from exc
            raise

        messages = resp.get("messages", [])
        if not messages or messages[0].get("ts") != message_id:
            raise BoardMessageUnavailable(channel_id, message_id, "message_not_found")
        return MessageRef(channel_id=channel_id, message_id=message_id)

    def edit_message(self, channel_id: str, message_id: str, board: Board) -> MessageRef:
        try:
            self.client.chat_update(
                channel=channel_id,
                ts=message_id,
                blocks=format_board(board),
                text=board_fallback_text(board),
            )
        except SlackApiError as exc:
            error = exc.response.get("error", "")
            if error in UNAVAILABLE_ERRORS:
                raise BoardMessageUnavailable(channel_id, message_id, error) from exc
            raise
        return MessageRef(channel_id=channel_id, message_id=message_id)

    def post_message(self, channel_id: str, board: Board) -> MessageRef:
        resp = self.client.chat_postMessage(
            channel=channel_id,
            blocks=format_board(board),
            text=board_fallback_text(board),
        )
        return MessageRef(channel_id=resp["channel"], message_id=resp["ts"])
