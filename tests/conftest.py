import pytest

from stubs import FakeBackend, sign_in
from vms import create_app
from vms.config import Config


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    SESSION_COOKIE_SECURE = False
    REMEMBER_COOKIE_SECURE = False
    SUPABASE_URL = None
    SUPABASE_ANON_KEY = None


@pytest.fixture
def backend():
    """In-memory backend with one registered volunteer."""
    fake = FakeBackend()
    fake.add_user()
    return fake


@pytest.fixture
def app(backend):
    """Create and configure a test application instance."""
    app = create_app(TestConfig, backend=backend)
    yield app


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def member(client, backend):
    """A client signed in as the seeded volunteer."""
    response = sign_in(client)
    assert response.status_code == 302
    return client
