"""
Test configuration for unit tests.
"""

from unittest.mock import MagicMock, patch

import pytest

from waylo.data.models import ItineraryPlan, PackingList, TripRequest


@pytest.fixture
def patched_genai(mock_gemini_client):
    """Patch the Gemini SDK so flows built without a client get the mock."""
    with patch("waylo.flows.base.genai") as mock_genai:
        mock_genai.Client.return_value = mock_gemini_client
        yield mock_genai


@pytest.fixture
def rome_request(rome_form):
    return TripRequest.model_validate(rome_form)


@pytest.fixture
def rome_plan(rome_itinerary_payload):
    return ItineraryPlan.model_validate(rome_itinerary_payload)


@pytest.fixture
def packing_list(packing_payload):
    return PackingList.model_validate(packing_payload)


@pytest.fixture
def mock_db():
    return MagicMock()
