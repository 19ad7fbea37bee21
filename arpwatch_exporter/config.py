"""Exporter configuration loaded via Pydantic settings."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_LISTEN_ADDRESS = ":9617"
DEFAULT_TELEMETRY_PATH = "/metrics"
DEFAULT_ARPWATCH_FILE = "/var/lib/arpwatch/arp.dat"
DEFAULT_REFRESH_INTERVAL_SECONDS = 30.0

_ALL_INTERFACES = "0.0.0.0"


class Settings(BaseSettings):
    """Start-up configuration sourced from environment variables and CLI flags."""

    listen_address: str = Field(default=DEFAULT_LISTEN_ADDRESS, alias="WEB_LISTEN_ADDRESS")
    telemetry_path: str = Field(default=DEFAULT_TELEMETRY_PATH, alias="WEB_TELEMETRY_PATH")
    arpwatch_file: str = Field(default=DEFAULT_ARPWATCH_FILE, alias="ARPWATCH_FILE")
    auth_username: str = Field(default="", alias="AUTH_USERNAME")
    auth_password: str = Field(default="", alias="AUTH_PASSWORD")
    refresh_interval_seconds: float = Field(
        default=DEFAULT_REFRESH_INTERVAL_SECONDS,
        gt=0,
        alias="REFRESH_INTERVAL_SECONDS",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
        "frozen": True,
    }

    @field_validator("telemetry_path")
    @classmethod
    def normalize_telemetry_path(cls, value: str) -> str:
        path = value.strip()
        if not path.startswith("/"):
            path = "/" + path
        if path == "/":
            raise ValueError("telemetry path must not be the root path")
        return path

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level '{value}'")
        return level

    @property
    def auth_enabled(self) -> bool:
        """Basic auth is enforced only when both credentials are configured."""

        return bool(self.auth_username) and bool(self.auth_password)

    def bind(self) -> tuple[str, int]:
        """Split the listen address into a (host, port) pair for the ASGI server."""

        return parse_listen_address(self.listen_address)


def parse_listen_address(address: str) -> tuple[str, int]:
    """Parse ``host:port`` addresses; an empty host means all interfaces.

    Bracketed IPv6 hosts such as ``[::1]:9617`` are unwrapped.
    """

    host, sep, port_text = address.strip().rpartition(":")
    if not sep:
        raise ValueError(f"listen address '{address}' is missing a port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if not port_text.isdigit():
        raise ValueError(f"listen address '{address}' has an invalid port")
    port = int(port_text)
    if not 0 < port < 65536:
        raise ValueError(f"listen address '{address}' has an out-of-range port")
    return host or _ALL_INTERFACES, port


@lru_cache
def get_settings() -> Settings:
    """Return cached settings built from the environment."""

    return Settings()  # type: ignore[call-arg]
