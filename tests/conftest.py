"""
Shared fixtures for the POI map engine tests.
"""
from typing import Callable

import pytest

from helpers import FakeFetcher, FakeRouting, fast_viewport_settings
from poimap.config.settings import Settings
from poimap.core.session import MapSession
from poimap.services.map_surface import HeadlessMapSurface


@pytest.fixture
def surface() -> HeadlessMapSurface:
    return HeadlessMapSurface()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def routing() -> FakeRouting:
    return FakeRouting()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(viewport=fast_viewport_settings(), log_format="text")


@pytest.fixture
def session_factory(surface, fetcher, routing, test_settings) -> Callable[..., MapSession]:
    def factory(**kwargs) -> MapSession:
        kwargs.setdefault("surface", surface)
        return MapSession(fetcher=fetcher, routing=routing, settings=test_settings, **kwargs)

    return factory
