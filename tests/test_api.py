from unittest.mock import patch

import pytest
import requests
from fastapi.testclient import TestClient

from hyrule_api.main import CHAT_UNAVAILABLE_MESSAGE, app, get_chat_relay, get_lookup_service
from hyrule_api.models import Character
from hyrule_api.services.catalog import Catalog
from hyrule_api.services.lookup_service import LookupService

POST = "hyrule_api.services.chat_relay.requests.post"

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, POST, OPTIONS",
    "access-control-allow-headers": "Content-Type",
}


def assert_cors(response):
    for name, value in CORS.items():
        assert response.headers[name] == value


def gemini_reply(*texts):
    return {"candidates": [{"content": {"parts": [{"text": t} for t in texts]}}]}


# -----------------------------------------------------------------------------
# Catalog endpoints
# -----------------------------------------------------------------------------

def test_characters(client):
    response = client.get("/characters")
    assert response.status_code == 200
    assert response.json() == [
        {"id": 1, "name": "Link", "description": "The hero of Hyrule, a courageous swordsman."},
        {"id": 2, "name": "Zelda", "description": "The princess of Hyrule, bearer of the Triforce of Wisdom."},
        {"id": 3, "name": "Ganon", "description": "The primary antagonist, seeking to conquer Hyrule."},
    ]
    assert_cors(response)


def test_creators(client):
    response = client.get("/creators")
    assert response.status_code == 200
    assert response.json() == [
        {"id": 1, "name": "Shigeru Miyamoto", "role": "Producer"},
        {"id": 2, "name": "Eiji Aonuma", "role": "Director"},
    ]
    assert_cors(response)


def test_repeated_listing_is_stable(client):
    assert client.get("/characters").json() == client.get("/characters").json()
    assert client.get("/creators").json() == client.get("/creators").json()


def test_search_zel_returns_zelda(client):
    response = client.get("/characters/search", params={"q": "zel"})
    assert response.status_code == 200
    assert response.json() == [
        {"id": 2, "name": "Zelda", "description": "The princess of Hyrule, bearer of the Triforce of Wisdom."},
    ]
    assert_cors(response)


def test_search_is_case_insensitive(client):
    assert [c["name"] for c in client.get("/characters/search?q=ZEL").json()] == ["Zelda"]


@pytest.mark.parametrize("url", ["/characters/search", "/characters/search?q="])
def test_search_without_query_returns_all(client, url):
    response = client.get(url)
    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["Link", "Zelda", "Ganon"]


def test_search_without_match_is_empty_array(client):
    response = client.get("/characters/search?q=epona")
    assert response.status_code == 200
    assert response.json() == []


def test_catalog_can_be_swapped(client):
    catalog = Catalog([Character(id=42, name="Navi", description="Hey! Listen!")], [])
    app.dependency_overrides[get_lookup_service] = lambda: LookupService(catalog)
    try:
        assert client.get("/characters").json() == [
            {"id": 42, "name": "Navi", "description": "Hey! Listen!"}
        ]
        assert client.get("/creators").json() == []
    finally:
        app.dependency_overrides.pop(get_lookup_service, None)


# -----------------------------------------------------------------------------
# CORS
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("path", ["/chat", "/characters", "/anything/at/all"])
def test_preflight_short_circuits(client, path):
    with patch(POST) as post:
        response = client.options(path, headers={
            "Origin": "https://example.com",
            "Access-Control-Request-Method": "POST",
        })
    assert response.status_code == 204
    assert response.content == b""
    assert_cors(response)
    post.assert_not_called()


def test_cors_headers_on_errors(client):
    assert_cors(client.get("/no-such-route"))
    assert_cors(client.post("/chat", content="{bad json", headers={"Content-Type": "application/json"}))


# -----------------------------------------------------------------------------
# POST /chat
# -----------------------------------------------------------------------------

def test_chat_returns_reply(client, gemini_response):
    with patch(POST, return_value=gemini_response(json_body=gemini_reply("Hyah! I am ready."))) as post:
        response = client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 200
    assert response.json() == {"reply": "Hyah! I am ready."}
    assert_cors(response)
    post.assert_called_once()


def test_chat_without_candidates_replies_fallback(client, gemini_response):
    with patch(POST, return_value=gemini_response(json_body={"candidates": []})):
        response = client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 200
    assert response.json() == {"reply": "No reply"}


@pytest.mark.parametrize("kwargs", [
    {"json": {"msg": "x"}},
    {"json": {"message": 5}},
    {"json": ["Hello"]},
    {"content": "not json", "headers": {"Content-Type": "application/json"}},
    {},
])
def test_malformed_chat_body_is_client_error(client, kwargs):
    with patch(POST) as post:
        response = client.post("/chat", **kwargs)

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid request"}
    post.assert_not_called()


def test_chat_upstream_status_is_internal_error(client, gemini_response):
    upstream = gemini_response(status_code=429, reason="Too Many Requests", text='{"error": "quota"}')
    with patch(POST, return_value=upstream):
        response = client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 500
    detail = response.json()["detail"]
    assert "429" in detail
    assert "quota" in detail
    assert_cors(response)


def test_chat_network_failure_is_internal_error(client):
    with patch(POST, side_effect=requests.exceptions.ConnectionError("boom")):
        response = client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to contact Gemini API"}


def test_chat_unexpected_failure_is_internal_error(client):
    with patch(POST, side_effect=RuntimeError("boom")):
        response = client.post("/chat", json={"message": "Hi"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Error processing chat: boom"}
    assert_cors(response)


def test_unhandled_error_still_carries_cors(client):
    def broken_lookup():
        raise RuntimeError("catalog exploded")

    app.dependency_overrides[get_lookup_service] = broken_lookup
    try:
        response = client.get("/characters")
    finally:
        app.dependency_overrides.pop(get_lookup_service, None)

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    assert_cors(response)


def test_chat_timeout_is_internal_error(client):
    with patch(POST, side_effect=requests.exceptions.Timeout("slow")):
        response = client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Timed out contacting Gemini API"}


def test_chat_bad_upstream_body_is_internal_error(client, gemini_response):
    with patch(POST, return_value=gemini_response(text="<html>oops</html>")):
        response = client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to parse Gemini response"}


def test_chat_without_api_key_is_unavailable(client):
    app.dependency_overrides[get_chat_relay] = lambda: None
    with patch(POST) as post:
        response = client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 503
    assert response.json() == {"detail": CHAT_UNAVAILABLE_MESSAGE}
    post.assert_not_called()
    # The rest of the service keeps working.
    assert client.get("/characters").status_code == 200


def test_startup_without_api_key_disables_chat(monkeypatch):
    monkeypatch.setattr("hyrule_api.main.GEMINI_API_KEY", "")
    with TestClient(app) as test_client:
        assert app.state.chat_relay is None
        assert test_client.get("/health").json()["chat_relay"] is False
        response = test_client.post("/chat", json={"message": "Hello"})
    assert response.status_code == 503


# -----------------------------------------------------------------------------
# Discovery and health
# -----------------------------------------------------------------------------

def test_root_lists_endpoints(client):
    body = client.get("/").json()
    assert body["message"] == "Hyrule Chat API"
    assert "/chat" in body["endpoints"]


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["catalog"] is True
    assert body["lookup_service"] is True
