"""
Integration tests for the v1 API.

WHAT: Test negotiate, analyze-vibe, chat and status over HTTP
WHY: Verify wire shapes and status codes the frontend depends on
HOW: FastAPI TestClient with pipeline/provider/settings dependency overrides
"""

import json

import pytest
from fastapi.testclient import TestClient

from fairfare.api.deps import get_pipeline, get_provider, get_settings
from fairfare.core.config import Settings
from fairfare.llm.types import ProviderTimeoutError
from fairfare.main import app
from fairfare.services.negotiation_pipeline import GENERIC_FAILURE_MESSAGE, NegotiationPipeline
from tests.fixtures.mock_llm import MockLLMProvider
from tests.fixtures.sample_data import REJECTED_PLAN, VALID_PLAN, VIBE_ANALYSIS

LONG_DESCRIPTION = "Barely used, price is final. No lowballers please."


class RecordingPlanStore:
    def __init__(self):
        self.saved = []

    def save(self, user_id, request, plan):
        self.saved.append(user_id)
        return "record-1"


@pytest.fixture
def wire():
    """Build a client whose pipeline answers with the given scripted responses."""
    def _wire(*responses, plan_store=None):
        provider = MockLLMProvider(list(responses))
        pipeline = NegotiationPipeline(provider, plan_store=plan_store)
        settings = Settings(VIBE_ANALYSIS_MIN_CHARS=20, LLM_PROVIDER="openai")
        app.dependency_overrides[get_pipeline] = lambda: pipeline
        app.dependency_overrides[get_provider] = lambda: provider
        app.dependency_overrides[get_settings] = lambda: settings
        return TestClient(app), provider

    yield _wire
    app.dependency_overrides.clear()


@pytest.mark.integration
class TestNegotiateEndpoint:
    """POST /api/v1/negotiate."""

    def test_accepted_plan(self, wire, request_data):
        client, provider = wire(json.dumps(VALID_PLAN))

        response = client.post("/api/v1/negotiate", json=request_data)

        assert response.status_code == 200
        assert response.json() == {
            "data": {
                "isValid": True,
                "plan": {
                    "priceRange": VALID_PLAN["priceRange"],
                    "reasoning": VALID_PLAN["reasoning"],
                    "scripts": VALID_PLAN["scripts"],
                },
            }
        }
        assert provider.call_count == 1

    def test_rejected_item(self, wire):
        client, _ = wire(json.dumps(REJECTED_PLAN))

        response = client.post(
            "/api/v1/negotiate",
            json={"itemName": "asdfghjkl", "location": "X", "price": 100, "vibe": "Friendly"},
        )

        assert response.status_code == 200
        assert response.json() == {"data": {"isValid": False, "reason": "not a real product"}}

    def test_upstream_failure_returns_502(self, wire, request_data):
        client, _ = wire(ProviderTimeoutError("OpenAI request timed out"))

        response = client.post("/api/v1/negotiate", json=request_data)

        assert response.status_code == 502
        assert response.json() == {"error": GENERIC_FAILURE_MESSAGE}

    def test_malformed_plan_returns_502(self, wire, request_data):
        client, _ = wire('{"isValid": true, "priceRange": "100-200"}')

        response = client.post("/api/v1/negotiate", json=request_data)

        assert response.status_code == 502
        assert "priceRange" not in response.text

    def test_user_header_persists_accepted_plan(self, wire, request_data):
        store = RecordingPlanStore()
        client, _ = wire(json.dumps(VALID_PLAN), plan_store=store)

        client.post("/api/v1/negotiate", json=request_data, headers={"X-User-Id": "user-42"})
        client.post("/api/v1/negotiate", json=request_data)

        assert store.saved == ["user-42"]

    @pytest.mark.parametrize("override", [
        {"itemName": ""},
        {"price": "free"},
        {"price": 0},
        {"vibe": "Sarcastic"},
    ])
    def test_invalid_request_returns_400_without_calls(self, wire, request_data, override):
        client, provider = wire(json.dumps(VALID_PLAN))

        response = client.post("/api/v1/negotiate", json={**request_data, **override})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"
        assert response.json()["details"]
        assert provider.call_count == 0


@pytest.mark.integration
class TestAnalyzeVibeEndpoint:
    """POST /api/v1/analyze-vibe."""

    @pytest.mark.parametrize("body", [{}, {"sellerDesc": ""}, {"sellerDesc": "   short text   "}])
    def test_short_description_returns_null(self, wire, body):
        client, provider = wire(json.dumps(VIBE_ANALYSIS))

        response = client.post("/api/v1/analyze-vibe", json=body)

        assert response.status_code == 200
        assert response.json() == {"analysis": None}
        assert provider.call_count == 0

    def test_analysis_returned(self, wire):
        client, _ = wire(f"Here:\n{json.dumps(VIBE_ANALYSIS)}")

        response = client.post("/api/v1/analyze-vibe", json={"sellerDesc": LONG_DESCRIPTION})

        assert response.status_code == 200
        assert response.json() == {"analysis": VIBE_ANALYSIS}

    def test_unparseable_analysis_returns_500(self, wire):
        client, _ = wire("I am not sure.")

        response = client.post("/api/v1/analyze-vibe", json={"sellerDesc": LONG_DESCRIPTION})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to analyze vibe."}


@pytest.mark.integration
class TestChatEndpoint:
    """POST /api/v1/chat."""

    def test_empty_messages_returns_400(self, wire):
        client, provider = wire("unused")

        response = client.post("/api/v1/chat", json={"messages": []})

        assert response.status_code == 400
        assert response.json() == {"error": "Messages are required."}
        assert provider.call_count == 0

    def test_reply_returned(self, wire):
        client, provider = wire("What's the condition of the bike?")

        response = client.post(
            "/api/v1/chat",
            json={
                "messages": [{"role": "user", "content": "I want to buy a bike"}],
                "image": "data:image/jpeg;base64,aW1n",
                "mimeType": "image/jpeg",
            },
        )

        assert response.status_code == 200
        assert response.json() == {"message": "What's the condition of the bike?"}
        parts = provider.calls[0]["messages"][-1]["content"]
        assert parts[1]["image_url"]["url"] == "data:image/jpeg;base64,aW1n"

    @pytest.mark.parametrize("image", ["data:image/png;base64", "data:image/png;base64,"])
    def test_malformed_image_returns_400(self, wire, image):
        client, provider = wire("unused")

        response = client.post(
            "/api/v1/chat",
            json={"messages": [{"role": "user", "content": "hi"}], "image": image, "mimeType": "image/png"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"
        assert provider.call_count == 0

    def test_upstream_failure_returns_500(self, wire):
        client, _ = wire(ProviderTimeoutError("timeout"))

        response = client.post("/api/v1/chat", json={"messages": [{"role": "user", "content": "hi"}]})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get a response from the AI."}


@pytest.mark.integration
class TestStatusEndpoints:
    """GET /api/v1/status and /."""

    def test_status(self, wire):
        client, _ = wire("unused")

        response = client.get("/api/v1/status")

        assert response.status_code == 200
        body = response.json()
        assert body["llm"]["provider"] == "openai"
        assert body["llm"]["available"] is True
        assert body["llm"]["models"] == ["mock-model"]
        assert body["database"]["available"] is False

    def test_root(self, wire):
        client, _ = wire("unused")

        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"
