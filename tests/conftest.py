"""Pytest fixtures for arpwatch exporter tests."""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from arpwatch_exporter.config import Settings
from arpwatch_exporter.devices import DeviceRefresher
from arpwatch_exporter.lib.metrics import ExporterMetrics
from arpwatch_exporter.main import create_app

SAMPLE_ARP_DATA = """aa:bb:cc:dd:ee:ff 10.0.0.1 1000 host-a
11:22:33:44:55:66 10.0.0.2 2000
# comment
bad-line
"""


@pytest.fixture()
def arp_file(tmp_path: Path) -> Path:
    """Write the reference arpwatch data file and return its path."""

    path = tmp_path / "arp.dat"
    path.write_text(SAMPLE_ARP_DATA, encoding="utf-8")
    return path


@pytest.fixture()
def metrics() -> ExporterMetrics:
    return ExporterMetrics()


@pytest.fixture()
def refresher(metrics: ExporterMetrics) -> DeviceRefresher:
    return DeviceRefresher(metrics)


@pytest.fixture()
def make_settings(arp_file: Path) -> Callable[..., Settings]:
    """Build settings pointing at the test data file, with explicit overrides."""

    def _factory(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "arpwatch_file": str(arp_file),
            "auth_username": "",
            "auth_password": "",
        }
        values.update(overrides)
        return Settings(**values)

    return _factory


@pytest.fixture()
def app(make_settings: Callable[..., Settings], metrics: ExporterMetrics) -> FastAPI:
    """Return an application sharing the test metrics registry (refresh loop not started)."""

    return create_app(make_settings(), metrics)


@asynccontextmanager
async def _client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Provide an `httpx.AsyncClient` bound to the application."""

    async with _client(app) as client:
        yield client


@pytest.fixture()
def client_for() -> Callable[[FastAPI], Any]:
    """Open a client for an application built inside the test."""

    return _client
