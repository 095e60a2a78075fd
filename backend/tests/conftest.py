"""
Pytest configuration and shared fixtures for backend tests.

WHAT: Centralized test configuration with markers and sample requests
WHY: Enable test organization, filtering, and shared test utilities
HOW: Define pytest markers and request/provider fixtures
"""

import pytest

from fairfare.models.negotiation import NegotiationRequest
from tests.fixtures.mock_llm import MockLLMProvider


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (isolated component tests)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (multiple components)"
    )


@pytest.fixture
def request_data():
    """Wire payload for scenario 1 (Used iPhone 11, Direct)."""
    return {
        "itemName": "Used iPhone 11",
        "location": "Addis Ababa",
        "price": "27000",
        "vibe": "Direct",
    }


@pytest.fixture
def negotiation_request(request_data):
    """Validated NegotiationRequest for scenario 1."""
    return NegotiationRequest.model_validate(request_data)


@pytest.fixture
def mock_provider_factory():
    """Build a MockLLMProvider with scripted responses."""
    def _factory(*responses):
        return MockLLMProvider(list(responses))
    return _factory
