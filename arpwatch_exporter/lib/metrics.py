"""Prometheus instruments for the exporter, held on an explicit registry."""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Iterable, Mapping

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    disable_created_metrics,
    generate_latest,
)
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

DeviceKey = tuple[str, str, str]

LAST_SEEN_METRIC = "arpwatch_device_last_seen_timestamp"
LAST_SEEN_HELP = "Unix timestamp when a MAC address was last seen"
LAST_SEEN_LABELS = ("mac", "ip", "hostname")

_EMPTY: Mapping[DeviceKey, int] = MappingProxyType({})

# Only the four exporter instruments are exposed; no `_created` companions.
disable_created_metrics()


class DeviceSnapshotCollector(Collector):
    """Expose the last-seen gauge from whichever snapshot is current at scrape time."""

    def __init__(self, metrics: "ExporterMetrics") -> None:
        self._metrics = metrics

    def describe(self) -> Iterable[GaugeMetricFamily]:
        return [GaugeMetricFamily(LAST_SEEN_METRIC, LAST_SEEN_HELP, labels=LAST_SEEN_LABELS)]

    def collect(self) -> Iterable[GaugeMetricFamily]:
        family = GaugeMetricFamily(LAST_SEEN_METRIC, LAST_SEEN_HELP, labels=LAST_SEEN_LABELS)
        for key, timestamp in sorted(self._metrics.snapshot().items()):
            family.add_metric(list(key), float(timestamp))
        yield family


class ExporterMetrics:
    """Own the collector registry and the four exporter instruments.

    The device snapshot is replaced by a single reference swap, so a scrape
    sees either the previous snapshot or the new one in full.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self._lock = threading.Lock()
        self._snapshot: Mapping[DeviceKey, int] = _EMPTY

        self.registry.register(DeviceSnapshotCollector(self))
        self.read_errors_total = Counter(
            "arpwatch_exporter_read_errors",
            "Total number of arpwatch file read errors",
            registry=self.registry,
        )
        self.last_read_timestamp = Gauge(
            "arpwatch_exporter_last_read_timestamp",
            "Unix timestamp of the last successful file read",
            registry=self.registry,
        )
        self.devices_tracked = Gauge(
            "arpwatch_devices_tracked_total",
            "Total number of devices currently being tracked",
            registry=self.registry,
        )

    def publish(self, snapshot: Mapping[DeviceKey, int]) -> None:
        """Replace the published device table wholesale."""

        frozen = MappingProxyType(dict(snapshot))
        with self._lock:
            self._snapshot = frozen

    def snapshot(self) -> Mapping[DeviceKey, int]:
        with self._lock:
            return self._snapshot

    def record_read_error(self) -> None:
        self.read_errors_total.inc()

    def record_success(self, device_count: int, when: float) -> None:
        self.devices_tracked.set(device_count)
        self.last_read_timestamp.set(when)

    def read_errors(self) -> float:
        value = self.registry.get_sample_value("arpwatch_exporter_read_errors_total")
        return value or 0.0

    def render(self) -> tuple[bytes, str]:
        """Serialize every instrument in the text exposition format."""

        return generate_latest(self.registry), CONTENT_TYPE_LATEST
