import pytest
from fastapi.testclient import TestClient

from clinic_booking.main import create_app
from clinic_booking.core.config import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        TESTING=True,
        TEST_DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY="test-secret-key-not-for-production",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client


@pytest.fixture
def db_session(app, client):
    """Session on the app's database, for arranging and inspecting rows directly."""
    session = app.state.context.session_factory()
    try:
        yield session
    finally:
        session.close()
