"""Data models for member statuses, the activity log, and the board pointer."""

from django.db import models

from availability.status import State

STATE_CHOICES = [(s.value, s.label) for s in State]


class MemberStatus(models.Model):
    """Current availability of one member. Overwritten on every transition."""

    member_id = models.CharField(max_length=32, unique=True)
    state = models.CharField(max_length=16, choices=STATE_CHOICES)
    metadata = models.JSONField(default=dict)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "member statuses"

    def __str__(self) -> str:
        return f"{self.member_id}: {self.state}"


class ActivityLogEntry(models.Model):
    """One recorded transition. Rows are only ever inserted."""

    member_id = models.CharField(max_length=32, db_index=True)
    action = models.CharField(max_length=16, choices=STATE_CHOICES)
    timestamp = models.DateTimeField(db_index=True)

    class Meta:
        ordering = ["timestamp", "id"]
        verbose_name_plural = "activity log"

    def __str__(self) -> str:
        return f"{self.member_id} -> {self.action} @ {self.timestamp.isoformat()}"


class BoardPointer(models.Model):
    """Location of the live status board message (at most one row)."""

    channel_id = models.CharField(max_length=32)
    message_id = models.CharField(max_length=32)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.channel_id}/{self.message_id}"
