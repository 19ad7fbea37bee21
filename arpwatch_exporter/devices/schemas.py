"""Pydantic models for arpwatch device observations and refresh outcomes."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DeviceObservation(BaseModel):
    """One row of the arpwatch data file."""

    mac: str = Field(..., min_length=1)
    ip: str = Field(..., min_length=1)
    timestamp: int
    hostname: str = ""

    model_config = {"frozen": True}

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.mac, self.ip, self.hostname)


class RefreshResult(BaseModel):
    """Outcome of a single refresh cycle."""

    ok: bool
    devices: int = 0
    skipped: int = 0
    error: str | None = None
