"""Team configuration: the manager and the ordered roster shown on the board."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


class NotAuthorizedError(PermissionError):
    """Raised when a non-manager invokes a manager-only action."""


@dataclass(frozen=True)
class RosterMember:
    member_id: str
    display_name: str


@dataclass(frozen=True)
class TeamConfig:
    manager_id: str
    roster: tuple[RosterMember, ...]
    time_zone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    sweep_interval: int = 60

    def is_manager(self, user_id: str) -> bool:
        return bool(user_id) and user_id == self.manager_id

    def require_manager(self, user_id: str) -> None:
        if not self.is_manager(user_id):
            raise NotAuthorizedError(f"{user_id} is not the team manager")


def parse_team_config(data: dict, manager_override: str = "", time_zone: str = "UTC",
                      sweep_interval: int = 60) -> TeamConfig:
    """Build a ``TeamConfig`` from the JSON team file layout.

    Expected shape::

        {"managerId": "U123", "team": [{"id": "U456", "name": "Alice"}, ...]}
    """
    manager_id = manager_override or data.get("managerId") or ""
    if not manager_id:
        raise ImproperlyConfigured("Team config names no manager (managerId or TEAM_MANAGER_ID).")

    roster = []
    seen = set()
    for entry in data.get("team", []):
        try:
            member_id = str(entry["id"])
            name = str(entry.get("name") or member_id)
        except (KeyError, TypeError, AttributeError) as exc:
            raise ImproperlyConfigured(f"Invalid roster entry: {entry!r}") from exc
        if member_id in seen:
            raise ImproperlyConfigured(f"Member {member_id} is listed twice in the roster.")
        seen.add(member_id)
        roster.append(RosterMember(member_id=member_id, display_name=name))

    try:
        tz = ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ImproperlyConfigured(f"Unknown BOARD_TIME_ZONE {time_zone!r}") from exc

    return TeamConfig(manager_id=str(manager_id), roster=tuple(roster), time_zone=tz,
                      sweep_interval=sweep_interval)


def load_team_config(path: str | Path | None = None) -> TeamConfig:
    """Read the team file named by ``settings.TEAM_CONFIG_PATH``."""
    path = Path(path or settings.TEAM_CONFIG_PATH)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ImproperlyConfigured(f"Team config file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ImproperlyConfigured(f"Team config file {path} is not valid JSON: {exc}") from exc

    return parse_team_config(
        data,
        manager_override=settings.TEAM_MANAGER_ID,
        time_zone=settings.BOARD_TIME_ZONE,
        sweep_interval=settings.STATUS_SWEEP_INTERVAL,
    )
