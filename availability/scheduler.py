"""Periodic expiry sweep.

One sweep reads every status, turns expired "active" statuses into
"inactive", and refreshes the board. ``ReconciliationScheduler`` repeats it on
a fixed interval in a background thread; its clock is injectable so sweeps
can be driven step by step.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from django.db import close_old_connections
from django.utils import timezone

from availability import store
from availability.gateway import BoardGateway
from availability.lifecycle import Transition, apply_transitions, compute_expiry
from availability.publisher import refresh_board
from availability.team import TeamConfig

logger = logging.getLogger("availability.scheduler")


@dataclass(frozen=True)
class SweepResult:
    ran_at: datetime
    expired: tuple[Transition, ...]


def sweep(team: TeamConfig, gateway: BoardGateway | None, now: datetime | None = None) -> SweepResult:
    """Expire stale active statuses and refresh the board."""
    now = now or timezone.now()
    transitions = compute_expiry(store.get_all_statuses(), now)
    apply_transitions(transitions, now=now)
    if transitions:
        logger.info("Sweep expired %d status(es): %s", len(transitions),
                    ", ".join(t.member_id for t in transitions))
    if gateway is not None:
        refresh_board(team, gateway, now=now)
    return SweepResult(ran_at=now, expired=tuple(transitions))


class ReconciliationScheduler:
    """Runs ``sweep`` every ``interval`` seconds until stopped."""

    def __init__(
        self,
        team: TeamConfig,
        gateway: BoardGateway | None,
        interval: float | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self.team = team
        self.gateway = gateway
        self.interval = interval if interval is not None else team.sweep_interval
        self.clock = clock
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def run_once(self) -> SweepResult | None:
        """Run one sweep at ``clock()``. Failures are logged, never raised."""
        try:
            return sweep(self.team, self.gateway, now=self.clock())
        except Exception:
            logger.exception("Status sweep failed")
            return None

    def run_forever(self) -> None:
        logger.info("Status sweep running every %ss", self.interval)
        while not self._stop.wait(self.interval):
            close_old_connections()
            self.run_once()

    def start(self) -> threading.Thread:
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._stop.clear()
        self._thread = threading.Thread(target=self.run_forever, name="status-sweep", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
