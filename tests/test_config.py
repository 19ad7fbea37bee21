"""Configuration and command-line parsing tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from arpwatch_exporter.__main__ import load_settings
from arpwatch_exporter.config import Settings, parse_listen_address


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep the host environment and any .env file out of these tests."""

    for name in (
        "WEB_LISTEN_ADDRESS",
        "WEB_TELEMETRY_PATH",
        "ARPWATCH_FILE",
        "AUTH_USERNAME",
        "AUTH_PASSWORD",
        "REFRESH_INTERVAL_SECONDS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults_match_arpwatch_conventions() -> None:
    settings = Settings()

    assert settings.listen_address == ":9617"
    assert settings.telemetry_path == "/metrics"
    assert settings.arpwatch_file == "/var/lib/arpwatch/arp.dat"
    assert settings.refresh_interval_seconds == 30.0
    assert settings.auth_enabled is False
    assert settings.bind() == ("0.0.0.0", 9617)


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEB_LISTEN_ADDRESS", "127.0.0.1:9100")
    monkeypatch.setenv("ARPWATCH_FILE", "/tmp/arp.dat")
    monkeypatch.setenv("AUTH_USERNAME", "admin")
    monkeypatch.setenv("AUTH_PASSWORD", "secret")

    settings = Settings()

    assert settings.bind() == ("127.0.0.1", 9100)
    assert settings.arpwatch_file == "/tmp/arp.dat"
    assert settings.auth_enabled is True


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        (":9617", ("0.0.0.0", 9617)),
        ("localhost:8080", ("localhost", 8080)),
        ("[::1]:9617", ("::1", 9617)),
        ("[::]:9617", ("::", 9617)),
    ],
)
def test_parse_listen_address(address: str, expected: tuple[str, int]) -> None:
    assert parse_listen_address(address) == expected


@pytest.mark.parametrize("address", ["9617", "host:", "host:http", ":0", ":70000"])
def test_parse_listen_address_rejects_bad_values(address: str) -> None:
    with pytest.raises(ValueError):
        parse_listen_address(address)


def test_telemetry_path_normalized() -> None:
    assert Settings(telemetry_path="stats").telemetry_path == "/stats"


def test_root_telemetry_path_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(telemetry_path="/")


def test_refresh_interval_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(refresh_interval_seconds=0)


def test_cli_flags_override_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARPWATCH_FILE", "/from/env.dat")
    monkeypatch.setenv("AUTH_USERNAME", "env-user")

    settings = load_settings(
        [
            "--web.listen-address",
            "127.0.0.1:9999",
            "--web.telemetry-path",
            "/arp",
            "--arpwatch.file",
            "/from/cli.dat",
            "--auth.password",
            "cli-pass",
            "--refresh-interval",
            "5",
            "--log-level",
            "debug",
        ]
    )

    assert settings.listen_address == "127.0.0.1:9999"
    assert settings.telemetry_path == "/arp"
    assert settings.arpwatch_file == "/from/cli.dat"
    assert settings.auth_username == "env-user"
    assert settings.auth_password == "cli-pass"
    assert settings.auth_enabled is True
    assert settings.refresh_interval_seconds == 5.0
    assert settings.log_level == "DEBUG"


def test_cli_rejects_invalid_listen_address() -> None:
    with pytest.raises(SystemExit) as excinfo:
        load_settings(["--web.listen-address", "no-port"])

    assert excinfo.value.code == 2


def test_unknown_log_level_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(log_level="loud")
