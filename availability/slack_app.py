"""Slack Bolt application wiring the status handlers to Slack events."""

import logging
from dataclasses import dataclass
from typing import Callable

from django.conf import settings
from slack_bolt import App
from slack_sdk.errors import SlackApiError

from availability.gateway import BoardGateway, SlackBoardGateway
from availability.handlers import (
    InvalidTimeInput,
    choose_status,
    dispatch_command,
    parse_active_until,
    parse_signed_off_until,
    submit_active,
    submit_signed_off,
)
from availability.status import State
from availability.team import TeamConfig
from integrations.slack_format import (
    ACTIVE_MODAL_ID,
    REASON_ACTION_ID,
    REASON_BLOCK_ID,
    SIGNED_OFF_MODAL_ID,
    STATUS_SELECT_ACTION_ID,
    UNTIL_ACTION_ID,
    UNTIL_BLOCK_ID,
    build_active_modal,
    build_signed_off_modal,
    format_report,
    modal_value,
)

logger = logging.getLogger("availability.slack_app")


def _reply(client, channel_id: str, user_id: str, text: str) -> None:
    """Send an ephemeral message if possible, otherwise DM the user."""
    if channel_id:
        try:
            client.chat_postEphemeral(channel=channel_id, user=user_id, text=text)
            return
        except SlackApiError as exc:
            logger.debug("Ephemeral reply to %s in %s failed: %s", user_id, channel_id, exc)
    client.chat_postMessage(channel=user_id, text=text)


@dataclass(frozen=True)
class Listeners:
    """Ack and lazy halves of every Slack listener, bound to one team."""

    ack_command: Callable
    lazy_command: Callable
    ack_status_select: Callable
    lazy_status_select: Callable
    ack_active_modal: Callable
    lazy_active_modal: Callable
    ack_signed_off_modal: Callable
    lazy_signed_off_modal: Callable


def build_listeners(team: TeamConfig, gateway: BoardGateway, command_name: str) -> Listeners:
    """Build the listener functions for ``team``.

    Ack halves only validate and answer Slack; status writes, board refreshes
    and confirmations happen in the lazy halves.
    """

    # -----------------------------------------------------------------------
    # Slash command
    # -----------------------------------------------------------------------

    def ack_command(ack):
        ack()

    def lazy_command(respond, command):
        reply = dispatch_command(
            team,
            gateway,
            user_id=command["user_id"],
            channel_id=command.get("channel_id", ""),
            text=command.get("text", ""),
            command_name=command_name,
        )
        if reply.board is not None:
            respond(blocks=format_report(reply.board), text=reply.text, response_type="ephemeral")
        else:
            respond(text=reply.text, response_type="ephemeral")

    # -----------------------------------------------------------------------
    # Status menu (modals must open while the trigger id is fresh)
    # -----------------------------------------------------------------------

    def ack_status_select(ack, body, client, action):
        ack()
        choice = action["selected_option"]["value"]
        channel_id = body.get("channel", {}).get("id", "")
        if choice == State.ACTIVE.value:
            client.views_open(trigger_id=body["trigger_id"], view=build_active_modal(channel_id))
        elif choice == State.SIGNED_OFF.value:
            client.views_open(trigger_id=body["trigger_id"], view=build_signed_off_modal(channel_id))

    def lazy_status_select(body, client, action):
        choice = action["selected_option"]["value"]
        user_id = body["user"]["id"]
        try:
            reply = choose_status(team, gateway, user_id, choice)
        except ValueError:
            logger.warning("Ignoring unknown status choice %r from %s", choice, user_id)
            return
        if reply is not None:
            _reply(client, body.get("channel", {}).get("id", ""), user_id, reply.text)

    # -----------------------------------------------------------------------
    # Modal submissions
    # -----------------------------------------------------------------------

    def ack_active_modal(ack, view):
        try:
            parse_active_until(team, modal_value(view, UNTIL_BLOCK_ID, UNTIL_ACTION_ID))
        except InvalidTimeInput as exc:
            ack(response_action="errors", errors={UNTIL_BLOCK_ID: exc.message})
            return
        ack()

    def lazy_active_modal(body, client):
        view = body["view"]
        user_id = body["user"]["id"]
        channel_id = view.get("private_metadata", "")
        try:
            reply = submit_active(team, gateway, user_id, modal_value(view, UNTIL_BLOCK_ID, UNTIL_ACTION_ID))
        except InvalidTimeInput as exc:
            _reply(client, channel_id, user_id, exc.message)
            return
        _reply(client, channel_id, user_id, reply.text)

    def ack_signed_off_modal(ack, view):
        try:
            parse_signed_off_until(team, modal_value(view, UNTIL_BLOCK_ID, UNTIL_ACTION_ID))
        except InvalidTimeInput as exc:
            ack(response_action="errors", errors={UNTIL_BLOCK_ID: exc.message})
            return
        ack()

    def lazy_signed_off_modal(body, client):
        view = body["view"]
        user_id = body["user"]["id"]
        channel_id = view.get("private_metadata", "")
        try:
            reply = submit_signed_off(
                team,
                gateway,
                user_id,
                modal_value(view, UNTIL_BLOCK_ID, UNTIL_ACTION_ID),
                modal_value(view, REASON_BLOCK_ID, REASON_ACTION_ID),
            )
        except InvalidTimeInput as exc:
            _reply(client, channel_id, user_id, exc.message)
            return
        _reply(client, channel_id, user_id, reply.text)

    return Listeners(
        ack_command=ack_command,
        lazy_command=lazy_command,
        ack_status_select=ack_status_select,
        lazy_status_select=lazy_status_select,
        ack_active_modal=ack_active_modal,
        lazy_active_modal=lazy_active_modal,
        ack_signed_off_modal=ack_signed_off_modal,
        lazy_signed_off_modal=lazy_signed_off_modal,
    )


def create_app(team: TeamConfig) -> App:
    """Build the Bolt app for ``team``.

    Listeners close over the team config and a gateway bound to the app's own
    Web API client.
    """
    app = App(
        token=settings.SLACK_BOT_TOKEN,
        signing_secret=settings.SLACK_SIGNING_SECRET,
        process_before_response=True,
    )
    listeners = build_listeners(team, SlackBoardGateway(app.client), settings.SLACK_COMMAND)

    app.command(settings.SLACK_COMMAND)(ack=listeners.ack_command, lazy=[listeners.lazy_command])
    app.action(STATUS_SELECT_ACTION_ID)(ack=listeners.ack_status_select, lazy=[listeners.lazy_status_select])
    app.view(ACTIVE_MODAL_ID)(ack=listeners.ack_active_modal, lazy=[listeners.lazy_active_modal])
    app.view(SIGNED_OFF_MODAL_ID)(ack=listeners.ack_signed_off_modal, lazy=[listeners.lazy_signed_off_modal])

    @app.error
    def handle_errors(error, body):
        logger.error("Unhandled error processing %s payload", body.get("type", "unknown"), exc_info=error)

    return app
