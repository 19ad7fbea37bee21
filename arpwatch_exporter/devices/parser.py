"""Parser for the whitespace-delimited arpwatch data format.

Each line reads ``<mac> <ip> <timestamp> [hostname]``; blank lines and lines
starting with ``#`` are ignored.
"""

from __future__ import annotations

import re

from arpwatch_exporter.devices.schemas import DeviceObservation

_MIN_FIELDS = 3
_TIMESTAMP_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class MalformedLineError(ValueError):
    """Raised when a data line cannot be turned into an observation."""

    def __init__(self, reason: str, line: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.reason = reason
        self.line = line


def parse_timestamp(value: str) -> int:
    """Parse a signed 64-bit base-10 integer.

    Underscores, surrounding whitespace and other spellings ``int`` would
    accept are rejected.
    """

    if not _TIMESTAMP_RE.fullmatch(value):
        raise ValueError(f"invalid timestamp {value!r}")
    timestamp = int(value)
    if not _INT64_MIN <= timestamp <= _INT64_MAX:
        raise ValueError(f"timestamp {value!r} out of range")
    return timestamp


def parse_line(line: str) -> DeviceObservation | None:
    """Return the observation on ``line``, or ``None`` for blank and comment lines."""

    line = line.rstrip("\r\n")
    if line.startswith("#"):
        return None

    parts = line.split()
    if not parts:
        return None
    if len(parts) < _MIN_FIELDS:
        raise MalformedLineError("invalid line format", line)

    try:
        timestamp = parse_timestamp(parts[2])
    except ValueError as exc:
        raise MalformedLineError("invalid timestamp format", line) from exc

    hostname = parts[3] if len(parts) > _MIN_FIELDS else ""
    return DeviceObservation(mac=parts[0], ip=parts[1], timestamp=timestamp, hostname=hostname)
