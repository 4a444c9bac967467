"""
API tests for the voice, list and catalog endpoints.
"""

import voice_cart.config as config_mod
from voice_cart.command_logic import NO_TEXT_MESSAGE
from voice_cart.routes import limiter
from voice_cart.transcription import (
    InvalidAudioError,
    TranscriptionConfigError,
    TranscriptionNetworkError,
    TranscriptionServiceError,
    TranscriptionTimeoutError,
)

AUDIO = "ZmFrZS1hdWRpbw=="


def _command(client, text, language="en"):
    resp = client.post("/voice/command", json={"text": text, "language": language})
    assert resp.status_code == 200
    return resp.json()


# ---------------------------------------------------------------------------
# Health / middleware
# ---------------------------------------------------------------------------

def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_request_id_generated(client):
    resp = client.get("/health")
    assert resp.headers["X-Request-ID"]


def test_request_id_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"


# ---------------------------------------------------------------------------
# /voice/command
# ---------------------------------------------------------------------------

class TestVoiceCommand:
    """Tests for interpreting typed or pre-transcribed text."""

    def test_add_english(self, client):
        data = _command(client, "add 2 bottles of water")

        assert data["transcript"] == "add 2 bottles of water"
        assert data["command"]["action"] == "add"
        assert data["command"]["item"] == "water"
        assert data["outcome"]["success"] is True
        assert data["outcome"]["message"] == "Added water"
        assert [(i["name"], i["quantity"], i["unit"]) for i in data["items"]] == [("water", 2, "bottles")]
        assert [s["name"] for s in data["suggestions"]] == ["water"]

    def test_add_hindi(self, client):
        data = _command(client, "दो बोतल पानी जोड़ो", "hi")
        assert data["command"]["item"] == "पानी"
        assert data["items"][0]["category"] == "beverages"

    def test_remove_then_list(self, client):
        _command(client, "add milk")
        _command(client, "add bread")
        data = _command(client, "remove the last item")

        assert data["outcome"]["message"] == "Removed: bread"
        assert [i["name"] for i in data["items"]] == ["milk"]

    def test_miss_is_not_an_http_error(self, client):
        data = _command(client, "remove bananas")
        assert data["outcome"]["success"] is False
        assert data["outcome"]["message"] == "No matching item to remove"

    def test_search_returns_results(self, client):
        data = _command(client, "find chips under $5")
        assert data["command"]["max_price"] == 5
        assert [r["name"] for r in data["outcome"]["results"]] == ["chips"]
        assert data["items"] == []

    def test_empty_text(self, client):
        data = _command(client, "")
        assert data["command"] is None
        assert data["outcome"]["success"] is False
        assert data["outcome"]["message"] == NO_TEXT_MESSAGE

    def test_text_too_long(self, client):
        resp = client.post("/voice/command", json={"text": "milk " * 200})
        assert resp.status_code == 422

    def test_language_defaults_to_english(self, client):
        resp = client.post("/voice/command", json={"text": "add eggs"})
        assert resp.json()["command"]["language"] == "en"


# ---------------------------------------------------------------------------
# /voice/transcribe and /voice/audio
# ---------------------------------------------------------------------------

class TestTranscribeEndpoint:
    """Tests for the transcription proxy and its error mapping."""

    def test_returns_text(self, client, fake_transcriber):
        fake_transcriber.text = "add milk"
        resp = client.post("/voice/transcribe", json={"audio_base64": AUDIO, "language": "hi"})

        assert resp.status_code == 200
        assert resp.json() == {"text": "add milk"}
        assert fake_transcriber.calls == [(AUDIO, "hi")]

    def test_missing_audio(self, client):
        resp = client.post("/voice/transcribe", json={"audio_base64": ""})
        assert resp.status_code == 422

    def test_invalid_audio(self, client, fake_transcriber):
        fake_transcriber.error = InvalidAudioError("Audio is not valid base64")
        resp = client.post("/voice/transcribe", json={"audio_base64": AUDIO})
        assert resp.status_code == 400

    def test_not_configured(self, client, fake_transcriber):
        fake_transcriber.error = TranscriptionConfigError("AssemblyAI API key not configured")
        resp = client.post("/voice/transcribe", json={"audio_base64": AUDIO})
        assert resp.status_code == 503
        assert "not configured" in resp.json()["detail"]

    def test_timeout(self, client, fake_transcriber):
        fake_transcriber.error = TranscriptionTimeoutError("Transcription timeout - took too long to complete")
        resp = client.post("/voice/transcribe", json={"audio_base64": AUDIO})
        assert resp.status_code == 504

    def test_service_error(self, client, fake_transcriber):
        fake_transcriber.error = TranscriptionServiceError("Transcription failed: bad audio")
        resp = client.post("/voice/transcribe", json={"audio_base64": AUDIO})
        assert resp.status_code == 502

    def test_network_error(self, client, fake_transcriber):
        fake_transcriber.error = TranscriptionNetworkError("Network error")
        resp = client.post("/voice/transcribe", json={"audio_base64": AUDIO})
        assert resp.status_code == 502


class TestAudioCommand:
    def test_transcribes_then_applies(self, client, fake_transcriber):
        fake_transcriber.text = "add 3 kg rice"
        resp = client.post("/voice/audio", json={"audio_base64": AUDIO})

        assert resp.status_code == 200
        data = resp.json()
        assert data["transcript"] == "add 3 kg rice"
        assert (data["items"][0]["name"], data["items"][0]["quantity"]) == ("rice", 3)

    def test_silent_recording(self, client, fake_transcriber):
        fake_transcriber.text = ""
        data = client.post("/voice/audio", json={"audio_base64": AUDIO}).json()
        assert data["command"] is None
        assert data["outcome"]["message"] == NO_TEXT_MESSAGE

    def test_transcription_failure_leaves_list_untouched(self, client, fake_transcriber):
        fake_transcriber.error = TranscriptionTimeoutError("timeout")
        resp = client.post("/voice/audio", json={"audio_base64": AUDIO})
        assert resp.status_code == 504
        assert client.get("/list").json() == []


def test_rate_limit_returns_429_when_exceeded(client, fake_transcriber, monkeypatch):
    """The audio endpoints are throttled per client."""
    monkeypatch.setattr(config_mod, "RATE_LIMIT_VOICE", "2 per minute")
    limiter.enabled = True
    limiter.reset()

    try:
        fake_transcriber.text = "add milk"
        for _ in range(2):
            resp = client.post("/voice/transcribe", json={"audio_base64": AUDIO})
            assert resp.status_code == 200

        resp3 = client.post("/voice/transcribe", json={"audio_base64": AUDIO})
        assert resp3.status_code == 429

        # Text commands are not throttled
        assert client.post("/voice/command", json={"text": "add eggs"}).status_code == 200
    finally:
        limiter.enabled = False
        limiter.reset()


# ---------------------------------------------------------------------------
# /list
# ---------------------------------------------------------------------------

class TestListEndpoints:
    """Tests for the list panel endpoints."""

    def test_manual_add(self, client):
        resp = client.post("/list/items", json={"name": "milk", "quantity": 2, "unit": "liters"})
        assert resp.status_code == 201
        data = resp.json()
        assert data["name"] == "milk"
        assert data["category"] == "dairy"
        assert data["id"].startswith("milk-")

    def test_manual_add_blank_name(self, client):
        resp = client.post("/list/items", json={"name": "   "})
        assert resp.status_code == 400

    def test_manual_add_invalid_quantity(self, client):
        resp = client.post("/list/items", json={"name": "milk", "quantity": 0})
        assert resp.status_code == 422

    def test_delete_item(self, client):
        item_id = client.post("/list/items", json={"name": "milk"}).json()["id"]

        resp = client.delete(f"/list/items/{item_id}")
        assert resp.status_code == 200
        assert resp.json()["name"] == "milk"
        assert client.get("/list").json() == []

    def test_delete_unknown_item(self, client):
        assert client.delete("/list/items/nope").status_code == 404

    def test_consolidated_and_group_delete(self, client):
        client.post("/list/items", json={"name": "milk"})
        client.post("/list/items", json={"name": "bread"})
        client.post("/list/items", json={"name": "milk", "quantity": 2})

        groups = client.get("/list/consolidated").json()
        assert [(g["name"], g["quantity"], g["count"]) for g in groups] == [
            ("milk", 3, 2),
            ("bread", 1, 1),
        ]

        resp = client.delete("/list/groups", params={"name": "milk", "category": "dairy"})
        assert resp.json() == {"removed": 2}
        assert [i["name"] for i in client.get("/list").json()] == ["bread"]

    def test_delete_empty_group(self, client):
        resp = client.delete("/list/groups", params={"name": "milk", "category": "dairy"})
        assert resp.status_code == 404

    def test_history_survives_removal(self, client):
        item_id = client.post("/list/items", json={"name": "milk"}).json()["id"]
        client.delete(f"/list/items/{item_id}")

        history = client.get("/list/history").json()
        assert [(h["name"], h["add_count"]) for h in history] == [("milk", 1)]

    def test_suggestions(self, client):
        client.post("/list/items", json={"name": "milk"})
        suggestions = client.get("/list/suggestions").json()
        assert suggestions == [{"name": "milk", "type": "recent", "category": "dairy"}]


# ---------------------------------------------------------------------------
# /catalog
# ---------------------------------------------------------------------------

class TestCatalogEndpoints:
    """Tests for inventory search and category browsing."""

    def test_search(self, client):
        resp = client.get("/catalog/inventory", params={"q": "milk"})
        assert resp.status_code == 200
        assert [i["name"] for i in resp.json()] == ["milk"]

    def test_search_with_price(self, client):
        resp = client.get("/catalog/inventory", params={"q": "c", "max_price": 3})
        assert all(i["price"] <= 3 for i in resp.json())

    def test_search_negative_price(self, client):
        resp = client.get("/catalog/inventory", params={"q": "milk", "max_price": -1})
        assert resp.status_code == 422

    def test_get_item(self, client):
        resp = client.get("/catalog/inventory/inv-6")
        assert resp.json()["name"] == "cheese"
        assert resp.json()["available"] is False

    def test_get_unknown_item(self, client):
        assert client.get("/catalog/inventory/inv-999").status_code == 404

    def test_add_catalog_item(self, client):
        resp = client.post("/catalog/inventory/inv-15/add")
        assert resp.status_code == 201
        assert resp.json()["category"] == "beverages"
        assert [i["name"] for i in client.get("/list").json()] == ["orange juice"]

    def test_add_unknown_catalog_item(self, client):
        assert client.post("/catalog/inventory/inv-999/add").status_code == 404

    def test_categories(self, client):
        assert len(client.get("/catalog/categories").json()) == 8
        filtered = client.get("/catalog/categories", params={"q": "nuts"}).json()
        assert [c["name"] for c in filtered] == ["protein", "snacks"]

    def test_category_items(self, client):
        resp = client.get("/catalog/categories/dairy/items")
        assert [i["name"] for i in resp.json()] == ["cheese", "milk", "yogurt"]

    def test_unknown_category(self, client):
        assert client.get("/catalog/categories/gadgets/items").status_code == 404
