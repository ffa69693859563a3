"""Shared test fixtures for the webhook service test suite.

Collaborators (Redis, Launchpad, GitHub) are replaced by the fakes in
`fakes.py`; the app fixture wires them in through dependency overrides.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from buildhook.builds.dispatcher import BuildDispatcher
from buildhook.core.cache import get_cache
from buildhook.core.config import Settings, get_settings
from buildhook.main import create_app
from buildhook.webhooks.dependencies import get_dispatcher
from fakes import TEST_ROOT_SECRET, FakeCache, FakeLaunchpad, FakeManifests


@pytest.fixture
def calls() -> list:
    return []


@pytest.fixture
def fake_cache(calls) -> FakeCache:
    return FakeCache(calls)


@pytest.fixture
def fake_launchpad(calls) -> FakeLaunchpad:
    return FakeLaunchpad(calls)


@pytest.fixture
def fake_manifests(calls) -> FakeManifests:
    return FakeManifests(calls)


@pytest.fixture
def dispatcher(fake_cache, fake_launchpad, fake_manifests) -> BuildDispatcher:
    return BuildDispatcher(
        cache=fake_cache,
        registry=fake_launchpad,
        manifests=fake_manifests,
        build_queue=fake_launchpad,
    )


# ---------------------------------------------------------------------------
# App + HTTP client
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    return Settings(
        github_webhook_secret=TEST_ROOT_SECRET,
        sentry_dsn="",
        debug=False,
    )


@pytest.fixture
def app(settings, fake_cache, dispatcher):
    """A FastAPI app with settings, cache and dispatcher overridden."""
    test_app = create_app()
    test_app.dependency_overrides[get_settings] = lambda: settings
    test_app.dependency_overrides[get_cache] = lambda: fake_cache
    test_app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    return test_app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
