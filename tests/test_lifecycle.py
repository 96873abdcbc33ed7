"""
Status transition and expiry tests.
"""

from datetime import timedelta

import pytest

from availability import store
from availability.lifecycle import (
    Transition,
    apply_transitions,
    compute_expiry,
    set_status,
    set_status_from_metadata,
)
from availability.models import ActivityLogEntry, MemberStatus
from availability.status import Active, Inactive, MalformedStatusError, SignedOff

from .conftest import NOW


@pytest.mark.django_db
class TestSetStatus:
    """Recording transitions in the store."""

    def test_first_status_creates_row_and_log(self):
        """A member's first status creates their row and one log entry."""
        set_status("UALICE", Active(until=NOW + timedelta(hours=2)), now=NOW)

        row = MemberStatus.objects.get(member_id="UALICE")
        assert row.state == "active"
        assert store.get_status("UALICE") == Active(until=NOW + timedelta(hours=2))

        entry = ActivityLogEntry.objects.get(member_id="UALICE")
        assert entry.action == "active"
        assert entry.timestamp == NOW

    def test_overwrite_replaces_state_and_metadata(self):
        """A new status fully overwrites the previous one."""
        set_status("UALICE", Active(until=NOW + timedelta(hours=2)), now=NOW)
        set_status("UALICE", SignedOff(until=NOW + timedelta(days=3), reason="Exams"), now=NOW)

        assert MemberStatus.objects.filter(member_id="UALICE").count() == 1
        assert store.get_status("UALICE") == SignedOff(until=NOW + timedelta(days=3), reason="Exams")
        assert MemberStatus.objects.get(member_id="UALICE").metadata["reason"] == "Exams"

    def test_repeated_identical_calls(self):
        """Same call twice: identical row, two log entries."""
        status = Inactive(since=NOW)
        set_status("UBOB", status, now=NOW)
        first = MemberStatus.objects.get(member_id="UBOB")
        set_status("UBOB", status, now=NOW)
        second = MemberStatus.objects.get(member_id="UBOB")

        assert (first.state, first.metadata) == (second.state, second.metadata)
        assert ActivityLogEntry.objects.filter(member_id="UBOB").count() == 2

    def test_from_metadata_validates_shape(self):
        """A raw pair missing its required field is rejected before any write."""
        with pytest.raises(MalformedStatusError):
            set_status_from_metadata("UBOB", "signed-off", {"reason": "no date"}, now=NOW)

        assert not MemberStatus.objects.exists()
        assert not ActivityLogEntry.objects.exists()

    def test_from_metadata_records_valid_pair(self):
        set_status_from_metadata("UBOB", "inactive", {"since": NOW.isoformat()}, now=NOW)
        assert store.get_status("UBOB") == Inactive(since=NOW)


class TestComputeExpiry:
    """Deriving automatic transitions from a snapshot."""

    def test_expired_active_becomes_inactive_now(self):
        """Exactly one transition per expired active member, since = now."""
        snapshot = {
            "UALICE": Active(until=NOW - timedelta(minutes=1)),
            "UBOB": Active(until=NOW - timedelta(hours=5)),
        }
        transitions = compute_expiry(snapshot, NOW)

        assert sorted(transitions, key=lambda t: t.member_id) == [
            Transition("UALICE", Inactive(since=NOW)),
            Transition("UBOB", Inactive(since=NOW)),
        ]

    def test_other_members_are_untouched(self):
        """Future active, inactive and signed-off statuses never transition."""
        snapshot = {
            "UALICE": Active(until=NOW + timedelta(minutes=1)),
            "UBOB": Inactive(since=NOW - timedelta(days=3)),
            "UCAROL": SignedOff(until=NOW - timedelta(days=1), reason="Past"),
            "UDAVE": Active(until=NOW),
        }
        assert compute_expiry(snapshot, NOW) == []

    def test_empty_snapshot(self):
        assert compute_expiry({}, NOW) == []


@pytest.mark.django_db
class TestApplyTransitions:
    """Applying computed transitions through set_status."""

    def test_applying_twice_is_harmless(self):
        """After one application the second sweep sees nothing to expire."""
        set_status("UALICE", Active(until=NOW - timedelta(minutes=5)), now=NOW - timedelta(hours=1))

        applied = apply_transitions(compute_expiry(store.get_all_statuses(), NOW), now=NOW)
        assert applied == 1
        assert store.get_status("UALICE") == Inactive(since=NOW)

        assert compute_expiry(store.get_all_statuses(), NOW + timedelta(minutes=1)) == []
        assert ActivityLogEntry.objects.filter(member_id="UALICE", action="inactive").count() == 1
