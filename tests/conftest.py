import pytest

from kinen.app import create_app
from kinen.config import TestConfig
from kinen.services.session import SESSION_KEY

from .fakes import FakeHttp


@pytest.fixture
def http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture
def app(http):
    app = create_app(TestConfig)
    app.extensions["http"] = http
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signed_in(client):
    """Test client whose cookie session already holds a token pair."""
    with client.session_transaction() as sess:
        sess[SESSION_KEY] = {
            "access_token": "T",
            "refresh_token": "R",
            "user_id": "U",
            "email": "a@b.com",
            "expires_at_ms": None,
        }
    return client
