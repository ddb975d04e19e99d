from __future__ import annotations

from typing import Callable

import httpx
import pytest

from adapters.http_client import build_async_client
from adapters.swapi_client import SwapiClient
from core.config import AppSettings
from fakes import BASE, FakeCatalog


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        api_base_url=BASE,
        session_path=tmp_path / "storage.json",
        search_debounce_seconds=0.01,
    )


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def transport(catalog: FakeCatalog) -> httpx.MockTransport:
    return httpx.MockTransport(catalog.handler)


@pytest.fixture
def make_client(settings: AppSettings, transport: httpx.MockTransport) -> Callable[[], SwapiClient]:
    def factory() -> SwapiClient:
        return SwapiClient(settings, client=build_async_client(settings, transport=transport))

    return factory
