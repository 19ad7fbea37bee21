"""Background task re-reading the arpwatch file on a fixed cadence."""

from __future__ import annotations

import asyncio
from pathlib import Path

from arpwatch_exporter.devices.schemas import RefreshResult
from arpwatch_exporter.devices.service import DeviceRefresher
from arpwatch_exporter.lib.logger import get_logger

logger = get_logger(__name__)


class RefreshLoop:
    """Run ``DeviceRefresher.refresh`` immediately and then every ``interval`` seconds.

    Cycles never overlap: each one finishes in a worker thread before the
    next sleep begins, so a slow read delays the schedule instead of
    stacking up concurrent refreshes.
    """

    def __init__(self, refresher: DeviceRefresher, path: str | Path, interval: float) -> None:
        if interval <= 0:
            raise ValueError("refresh interval must be positive")
        self._refresher = refresher
        self._path = Path(path)
        self._interval = interval
        self._task: asyncio.Task[None] | None = None
        self.cycles = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="arpwatch-refresh")

        def _cleanup(task: asyncio.Task[None]) -> None:
            try:
                task.result()
            except asyncio.CancelledError:
                pass
            except Exception:  # pragma: no cover - logged for observability
                logger.exception("arpwatch.refresh.loop_crashed", extra={"path": str(self._path)})

        self._task.add_done_callback(_cleanup)
        logger.info(
            "arpwatch.refresh.loop_started",
            extra={"path": str(self._path), "interval_seconds": self._interval},
        )

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("arpwatch.refresh.loop_stopped", extra={"path": str(self._path)})

    async def run_once(self) -> RefreshResult | None:
        """Run a single cycle off the event loop; unexpected errors are logged, not raised."""

        try:
            return await asyncio.to_thread(self._refresher.refresh, self._path)
        except Exception:
            logger.exception("arpwatch.refresh.cycle_failed", extra={"path": str(self._path)})
            return None
        finally:
            self.cycles += 1

    async def _run(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self._interval)
