"""
Shared test configuration and fixtures.
"""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# Keep the real environment out of the app under test
with patch.dict(
    os.environ,
    {
        "RELAY_MODE": "deep_link",
        "ANDROID_SCHEME": "aiEdgeGallery",
    },
):
    from app.main import app
    from app.relay.config import RelayConfig, get_relay_config

TOKEN_URL = "https://provider.test/oauth/token"
USERINFO_URL = "https://provider.test/api/whoami-v2"

client = TestClient(app)


def make_config(**overrides) -> RelayConfig:
    """Build a relay config pointing at the fake provider."""
    values = {
        "mode": "deep_link",
        "client_id": "test-client-id",
        "client_secret": "test-client-secret",
        "redirect_uri": "https://relay.test/auth/callback",
        "app_scheme": "aiEdgeGallery",
        "token_url": TOKEN_URL,
        "userinfo_url": USERINFO_URL,
        "http_timeout": 5.0,
    }
    values.update(overrides)
    return RelayConfig(**values)


@pytest.fixture
def deep_link_config():
    """Deep link mode config with fake credentials."""
    return make_config()


@pytest.fixture
def window_message_config():
    """Window message mode config."""
    return make_config(mode="window_message", client_id=None, client_secret=None)


@pytest.fixture
def deep_link_client(deep_link_config):
    """Test client relaying through deep links."""
    app.dependency_overrides[get_relay_config] = lambda: deep_link_config
    yield client
    app.dependency_overrides.pop(get_relay_config, None)


@pytest.fixture
def window_message_client(window_message_config):
    """Test client relaying through opener window messages."""
    app.dependency_overrides[get_relay_config] = lambda: window_message_config
    yield client
    app.dependency_overrides.pop(get_relay_config, None)
