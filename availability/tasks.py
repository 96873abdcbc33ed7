"""Celery background tasks for the periodic status sweep."""

import logging

from celery import shared_task
from django.conf import settings
from slack_sdk import WebClient

from availability.gateway import SlackBoardGateway
from availability.scheduler import sweep
from availability.team import load_team_config

logger = logging.getLogger("availability.tasks")


@shared_task
def sweep_expired_statuses() -> dict:
    """Expire stale active statuses and refresh the board.

    Scheduled by ``CELERY_BEAT_SCHEDULE`` for deployments that run the bot
    with ``--no-sweep``.

    Returns:
        A dict with the sweep time and the member ids that expired.
    """
    team = load_team_config()
    gateway = SlackBoardGateway(WebClient(token=settings.SLACK_BOT_TOKEN)) if settings.SLACK_BOT_TOKEN else None
    result = sweep(team, gateway)
    logger.info("Celery sweep finished: %d expired", len(result.expired))
    return {
        "ran_at": result.ran_at.isoformat(),
        "expired": [t.member_id for t in result.expired],
    }
