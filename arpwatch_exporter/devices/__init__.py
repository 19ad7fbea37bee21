"""Device package turning arpwatch data into published metrics."""

from arpwatch_exporter.devices.loop import RefreshLoop
from arpwatch_exporter.devices.parser import MalformedLineError, parse_line
from arpwatch_exporter.devices.schemas import DeviceObservation, RefreshResult
from arpwatch_exporter.devices.service import DeviceRefresher

__all__ = [
    "DeviceObservation",
    "DeviceRefresher",
    "MalformedLineError",
    "RefreshLoop",
    "RefreshResult",
    "parse_line",
]
