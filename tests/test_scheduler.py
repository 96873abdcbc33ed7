"""
Expiry sweep and scheduler tests.
"""

from datetime import timedelta
from unittest import mock

import pytest

from availability import store
from availability.lifecycle import set_status
from availability.models import ActivityLogEntry
from availability.publisher import current_board, publish
from availability.scheduler import ReconciliationScheduler, sweep
from availability.status import Active, Inactive, SignedOff

from .conftest import NOW


@pytest.mark.django_db
class TestSweep:
    """A single sweep over stored statuses."""

    def test_expires_only_stale_active_statuses(self, team, gateway):
        earlier = NOW - timedelta(hours=3)
        set_status("UALICE", Active(until=NOW - timedelta(minutes=1)), now=earlier)
        set_status("UBOB", Active(until=NOW + timedelta(hours=1)), now=earlier)
        set_status("UCAROL", SignedOff(until=NOW - timedelta(days=1)), now=earlier)

        result = sweep(team, gateway, now=NOW)

        assert [t.member_id for t in result.expired] == ["UALICE"]
        assert store.get_status("UALICE") == Inactive(since=NOW)
        assert store.get_status("UBOB") == Active(until=NOW + timedelta(hours=1))
        assert store.get_status("UCAROL") == SignedOff(until=NOW - timedelta(days=1))

    def test_expiry_is_logged_as_transition(self, team, gateway):
        set_status("UALICE", Active(until=NOW - timedelta(minutes=1)), now=NOW - timedelta(hours=1))
        sweep(team, gateway, now=NOW)

        actions = list(ActivityLogEntry.objects.filter(member_id="UALICE").values_list("action", flat=True))
        assert actions == ["active", "inactive"]

    def test_refreshes_tracked_board(self, team, gateway):
        ref = publish(current_board(team, NOW), gateway, channel_id="CBOARD")
        set_status("UALICE", Active(until=NOW - timedelta(minutes=1)), now=NOW - timedelta(hours=1))

        sweep(team, gateway, now=NOW)

        assert gateway.edits == [ref]
        assert gateway.live_board(ref).fields[0].value == "Inactive since 20.09.2025 12:00"

    def test_second_sweep_changes_nothing(self, team, gateway):
        set_status("UALICE", Active(until=NOW - timedelta(minutes=1)), now=NOW - timedelta(hours=1))
        sweep(team, gateway, now=NOW)

        result = sweep(team, gateway, now=NOW + timedelta(minutes=1))

        assert result.expired == ()
        assert store.get_status("UALICE") == Inactive(since=NOW)

    def test_works_without_gateway(self, team):
        set_status("UALICE", Active(until=NOW - timedelta(minutes=1)), now=NOW - timedelta(hours=1))
        assert len(sweep(team, None, now=NOW).expired) == 1


@pytest.mark.django_db
class TestReconciliationScheduler:
    """The periodic runner around sweep."""

    def test_run_once_uses_injected_clock(self, team, gateway):
        """Expiry is judged against the injected clock, not wall time."""
        set_status("UALICE", Active(until=NOW + timedelta(minutes=30)), now=NOW)
        clock = mock.Mock(return_value=NOW)
        scheduler = ReconciliationScheduler(team, gateway, clock=clock)

        assert scheduler.run_once().expired == ()

        clock.return_value = NOW + timedelta(hours=1)
        result = scheduler.run_once()
        assert [t.member_id for t in result.expired] == ["UALICE"]
        assert store.get_status("UALICE") == Inactive(since=NOW + timedelta(hours=1))

    def test_run_once_logs_and_survives_failures(self, team, gateway):
        scheduler = ReconciliationScheduler(team, gateway, clock=lambda: NOW)
        with mock.patch("availability.scheduler.sweep", side_effect=RuntimeError("boom")):
            assert scheduler.run_once() is None

    def test_interval_defaults_to_team_config(self, team, gateway):
        assert ReconciliationScheduler(team, gateway).interval == 60
        assert ReconciliationScheduler(team, gateway, interval=5).interval == 5


class TestSchedulerThread:
    """Starting and stopping the background thread."""

    def test_start_and_stop(self, team, gateway):
        scheduler = ReconciliationScheduler(team, gateway, interval=3600)
        with mock.patch.object(scheduler, "run_once") as run_once:
            scheduler.start()
            assert scheduler.running
            scheduler.stop(timeout=1)

        assert not scheduler.running
        run_once.assert_not_called()
