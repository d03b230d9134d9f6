import json

import pytest
import requests
from fastapi.testclient import TestClient

from config import CATALOG_PATH
from hyrule_api.main import app, get_chat_relay
from hyrule_api.services.catalog import load_catalog
from hyrule_api.services.chat_relay import ChatRelay

TEST_API_KEY = "test-gemini-key-0123"
TEST_PERSONA = "You are Link. User: "


@pytest.fixture
def seed_catalog():
    return load_catalog(CATALOG_PATH)


@pytest.fixture
def relay():
    return ChatRelay(
        api_key=TEST_API_KEY,
        model="gemini-test",
        base_url="https://gemini.example/v1",
        persona_prompt=TEST_PERSONA,
        timeout=5.0,
    )


@pytest.fixture
def client(relay):
    """TestClient with startup run and the chat relay pinned to the test relay."""
    app.dependency_overrides[get_chat_relay] = lambda: relay
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_chat_relay, None)


@pytest.fixture
def gemini_response():
    """Factory for real requests.Response objects as Gemini would send them."""
    def _make(status_code=200, json_body=None, text=None, reason="OK"):
        response = requests.Response()
        response.status_code = status_code
        response.reason = reason
        body = text if text is not None else json.dumps(json_body)
        response._content = body.encode("utf-8")
        response.encoding = "utf-8"
        return response
    return _make
