"""Test the application factory."""

import pytest
from fastapi.testclient import TestClient

from nexus.app import create_app
from nexus.configs import get_settings


@pytest.fixture()
def settings_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_healthcheck_and_chat_routes(settings_env) -> None:
    app = create_app()
    client = TestClient(app)

    assert client.get("/").json() == {"status": "ok"}
    paths = {route.path for route in app.routes}
    assert "/chat/sessions/{session_id}/messages" in paths
