"""Refresh cycle turning the arpwatch data file into published device metrics."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, TextIO

from arpwatch_exporter.devices.parser import MalformedLineError, parse_line
from arpwatch_exporter.devices.schemas import RefreshResult
from arpwatch_exporter.lib.logger import get_logger
from arpwatch_exporter.lib.metrics import DeviceKey, ExporterMetrics

logger = get_logger(__name__)


def _open_source(path: Path) -> TextIO:
    return path.open("r", encoding="utf-8", errors="replace")


class DeviceRefresher:
    """Parse the data file and replace the published device snapshot.

    A cycle that fails to open the file, or fails while reading it, leaves
    the last good snapshot and the summary gauges exactly as they were.
    """

    def __init__(self, metrics: ExporterMetrics, *, clock: Callable[[], float] = time.time) -> None:
        self._metrics = metrics
        self._clock = clock

    def refresh(self, path: str | Path) -> RefreshResult:
        source = Path(path)
        try:
            handle = _open_source(source)
        except OSError as exc:
            return self._fail("arpwatch.refresh.open_failed", source, exc)

        entries: dict[DeviceKey, int] = {}
        devices = 0
        skipped = 0
        try:
            with handle:
                for number, line in enumerate(handle, start=1):
                    try:
                        observation = parse_line(line)
                    except MalformedLineError as exc:
                        skipped += 1
                        logger.warning(
                            "arpwatch.parse.line_skipped",
                            extra={"path": str(source), "line_number": number, "reason": exc.reason, "line": exc.line},
                        )
                        continue
                    if observation is None:
                        continue
                    entries[observation.key] = observation.timestamp
                    devices += 1
        except OSError as exc:
            return self._fail("arpwatch.refresh.read_failed", source, exc, devices=devices, skipped=skipped)

        self._metrics.publish(entries)
        self._metrics.record_success(devices, self._clock())
        logger.info(
            "arpwatch.refresh.completed",
            extra={"path": str(source), "devices": devices, "series": len(entries), "skipped": skipped},
        )
        return RefreshResult(ok=True, devices=devices, skipped=skipped)

    def _fail(self, event: str, source: Path, exc: OSError, *, devices: int = 0, skipped: int = 0) -> RefreshResult:
        self._metrics.record_read_error()
        logger.error(event, extra={"path": str(source), "error": str(exc)})
        return RefreshResult(ok=False, devices=devices, skipped=skipped, error=str(exc))
