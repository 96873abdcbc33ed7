"""Management command to print the weekly activity report."""

from django.core.management.base import BaseCommand

from availability.publisher import weekly_report
from availability.team import load_team_config


class Command(BaseCommand):
    help = "Print per-member status activity for the last 7 days."

    def handle(self, *args, **options):
        team = load_team_config()
        report = weekly_report(team)

        self.stdout.write(report.title)
        self.stdout.write(report.description)
        for field in report.fields:
            self.stdout.write("")
            self.stdout.write(field.name)
            for line in field.value.splitlines():
                self.stdout.write(f"  {line}")
