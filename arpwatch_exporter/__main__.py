"""Command-line entrypoint: ``arpwatch-exporter`` / ``python -m arpwatch_exporter``."""

from __future__ import annotations

import argparse
from typing import Any, Sequence

import uvicorn
from pydantic import ValidationError

from arpwatch_exporter.config import Settings
from arpwatch_exporter.lib.logger import configure_logging, get_logger
from arpwatch_exporter.main import create_app

logger = get_logger(__name__)

# argparse dest -> Settings field; unset flags fall back to the environment.
_FLAG_FIELDS = {
    "listen_address": "listen_address",
    "telemetry_path": "telemetry_path",
    "arpwatch_file": "arpwatch_file",
    "auth_username": "auth_username",
    "auth_password": "auth_password",
    "refresh_interval": "refresh_interval_seconds",
    "log_level": "log_level",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arpwatch-exporter",
        description="Expose arpwatch device data as Prometheus metrics.",
    )
    parser.add_argument("--web.listen-address", dest="listen_address", help="Address to listen on for telemetry (default :9617)")
    parser.add_argument("--web.telemetry-path", dest="telemetry_path", help="Path under which to expose metrics (default /metrics)")
    parser.add_argument("--arpwatch.file", dest="arpwatch_file", help="Path to the arpwatch data file (default /var/lib/arpwatch/arp.dat)")
    parser.add_argument("--auth.username", dest="auth_username", help="Username for basic auth (disabled if empty)")
    parser.add_argument("--auth.password", dest="auth_password", help="Password for basic auth (disabled if empty)")
    parser.add_argument("--refresh-interval", dest="refresh_interval", type=float, help="Seconds between file reads (default 30)")
    parser.add_argument("--log-level", dest="log_level", help="Logging level (default INFO)")
    return parser


def load_settings(argv: Sequence[str] | None = None) -> Settings:
    """Merge CLI flags over environment configuration."""

    parser = build_parser()
    args = parser.parse_args(argv)
    overrides: dict[str, Any] = {}
    for dest, field in _FLAG_FIELDS.items():
        value = getattr(args, dest)
        if value is not None:
            overrides[field] = value

    try:
        settings = Settings(**overrides)
        settings.bind()
    except (ValidationError, ValueError) as exc:
        parser.error(str(exc))
    return settings


def main(argv: Sequence[str] | None = None) -> None:
    settings = load_settings(argv)
    configure_logging(settings.log_level)
    host, port = settings.bind()
    app = create_app(settings)

    logger.info(
        "arpwatch.exporter.starting",
        extra={"host": host, "port": port, "metrics_url": f"{settings.listen_address}{settings.telemetry_path}"},
    )
    # uvicorn exits the process non-zero when the listener cannot bind.
    uvicorn.run(app, host=host, port=port, log_config=None, access_log=False)


if __name__ == "__main__":
    main()
