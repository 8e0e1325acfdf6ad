import os
import sys

import pytest

# Ensure project root is on sys.path so 'app', 'config', and 'src' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from tests.support import factories as test_factories
from tests.support import stubs as test_stubs


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep developer credentials and .env values out of the tests."""
    monkeypatch.setenv("SPOTIFY_CLIENT_ID", "test-client-id")
    monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "test-client-secret")
    monkeypatch.delenv("ENABLE_RATE_LIMITING", raising=False)
    yield


@pytest.fixture
def factories():
    return test_factories


@pytest.fixture
def settings():
    from src.settings import load_app_settings

    return load_app_settings(
        {
            "spotify_client_id": "test-client-id",
            "spotify_client_secret": "test-client-secret",
            "cors_allowed_origins": ["http://localhost:3000"],
            "enable_rate_limiting": False,
        }
    )


@pytest.fixture
def clock():
    return test_stubs.FakeClock()


@pytest.fixture
def token_session():
    return test_stubs.FakeSession()


@pytest.fixture
def api_session():
    return test_stubs.FakeSession()


@pytest.fixture
def credentials(settings, token_session, clock):
    from src.domain.catalog import CredentialProvider

    return CredentialProvider(
        settings.spotify_client_id,
        settings.spotify_client_secret,
        token_url=settings.token_url,
        session=token_session,
        clock=clock,
    )


@pytest.fixture
def resolver(credentials, api_session, settings):
    from src.domain.catalog import PlaylistResolver

    return PlaylistResolver(credentials, api_base_url=settings.api_base_url, session=api_session)


@pytest.fixture
def app(settings, credentials, resolver):
    import app as app_module

    application = app_module.create_app(
        settings=settings,
        credential_provider=credentials,
        playlist_resolver=resolver,
    )
    application.config["TESTING"] = True
    yield application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def scheduler():
    return test_stubs.ManualScheduler()


@pytest.fixture
def executor():
    return test_stubs.ManualExecutor()
