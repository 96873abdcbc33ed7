"""
Health check endpoint and Celery task tests.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from availability import store
from availability.lifecycle import set_status
from availability.status import Active, Inactive
from availability.tasks import sweep_expired_statuses


@pytest.mark.django_db
class TestHealthCheck:
    """GET /api/health/"""

    def test_no_board(self, client):
        response = client.get("/api/health/")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "board_tracked": False}

    def test_board_tracked(self, client):
        store.replace_board_pointer("CBOARD", "1700.01")
        assert client.get("/api/health/").json()["board_tracked"] is True

    def test_post_not_allowed(self, client):
        assert client.post("/api/health/").status_code == 405


@pytest.mark.django_db
class TestSweepTask:
    """The Celery beat entry point."""

    def test_expires_and_reports_members(self, settings, tmp_path):
        path = tmp_path / "team.json"
        path.write_text('{"managerId": "UMANAGER", "team": [{"id": "UALICE", "name": "Alice"}]}', encoding="utf-8")
        settings.TEAM_CONFIG_PATH = str(path)
        settings.TEAM_MANAGER_ID = ""
        settings.SLACK_BOT_TOKEN = ""

        past = timezone.now() - timedelta(hours=1)
        set_status("UALICE", Active(until=past), now=past - timedelta(hours=1))

        result = sweep_expired_statuses()

        assert result["expired"] == ["UALICE"]
        assert isinstance(store.get_status("UALICE"), Inactive)
