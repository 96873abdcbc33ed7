"""Management command to start the Slack bot in Socket Mode."""

import logging

from django.conf import settings
from django.core.management.base import BaseCommand
from slack_bolt.adapter.socket_mode import SocketModeHandler

from availability.gateway import SlackBoardGateway
from availability.scheduler import ReconciliationScheduler
from availability.slack_app import create_app
from availability.team import load_team_config

logger = logging.getLogger("availability")
fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")


class Command(BaseCommand):
    help = "Start the Rollcall Slack bot via Socket Mode, with the status sweep running alongside"

    def add_arguments(self, parser):
        parser.add_argument(
            "--no-sweep",
            action="store_true",
            help="Do not run the in-process status sweep (use the Celery beat task instead).",
        )

    def handle(self, *args, **options):
        # Django's logging setup makes basicConfig a no-op,
        # so attach a console handler to the root logger directly.
        handler_console = logging.StreamHandler()
        handler_console.setFormatter(fmt)
        root = logging.getLogger()
        root.addHandler(handler_console)
        root.setLevel(logging.INFO)

        team = load_team_config()
        logger.info("Tracking %d member(s), manager %s", len(team.roster), team.manager_id)

        app = create_app(team)
        scheduler = None
        if not options["no_sweep"]:
            scheduler = ReconciliationScheduler(team, SlackBoardGateway(app.client))
            scheduler.start()

        logger.info("Starting Rollcall Slack bot...")
        try:
            SocketModeHandler(app, settings.SLACK_APP_TOKEN).start()
        finally:
            if scheduler is not None:
                scheduler.stop(timeout=5)
