"""Periodic status sweep."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime

from drivetime_scheduler.services.sessions import SessionService, SweepReport

logger = logging.getLogger(__name__)


@dataclass
class StatusScheduler:
    """Runs the session sweep on a fixed interval inside the event loop."""

    session_service: SessionService
    interval_seconds: float = 60.0
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self, now: datetime | None = None) -> SweepReport:
        """Run a single sweep and log what changed."""
        report = self.session_service.sweep(now)
        for transition in report.transitions:
            logger.debug(
                "Session %s: %s -> %s",
                transition.session_id,
                transition.old_status,
                transition.new_status,
            )
        return report

    async def start(self) -> None:
        """Start the background loop; calling it twice is a no-op."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="status-sweep")

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to exit."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _loop(self) -> None:
        while True:
            try:
                self.run_once()
            except Exception:
                logger.exception("Status sweep failed")
            await asyncio.sleep(self.interval_seconds)
