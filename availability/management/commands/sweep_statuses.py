"""Management command to run one status sweep.

Useful from cron when the bot runs without its in-process sweep:
    * * * * * cd /srv/rollcall && venv/bin/python3 manage.py sweep_statuses
"""

import logging

from django.conf import settings
from django.core.management.base import BaseCommand
from slack_sdk import WebClient

from availability.board import format_timestamp
from availability.gateway import SlackBoardGateway
from availability.scheduler import sweep
from availability.team import load_team_config

logger = logging.getLogger("availability.management.sweep_statuses")


class Command(BaseCommand):
    help = "Expire active statuses whose time has passed and refresh the status board."

    def handle(self, *args, **options):
        team = load_team_config()
        gateway = None
        if settings.SLACK_BOT_TOKEN:
            gateway = SlackBoardGateway(WebClient(token=settings.SLACK_BOT_TOKEN))
        else:
            self.stdout.write("SLACK_BOT_TOKEN not set, board will not be refreshed.")

        try:
            result = sweep(team, gateway)
        except Exception:
            logger.exception("Status sweep failed")
            self.stderr.write("ERROR: Status sweep failed.")
            return

        if not result.expired:
            self.stdout.write("No expired statuses.")
            return

        for transition in result.expired:
            self.stdout.write(
                f"{transition.member_id} is now inactive since "
                f"{format_timestamp(result.ran_at, team.time_zone)}"
            )
        self.stdout.write(f"Done. Expired {len(result.expired)} status(es).")
