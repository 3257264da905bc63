"""
Pytest configuration for the Waylo tests.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from waylo.config import APIConfig, FlowModelConfig, LogLevel, SystemConfig, WayloConfig
from waylo.utils import setup_logging


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Set up logging for tests."""
    setup_logging(LogLevel.DEBUG)


def make_response(payload):
    """Build a fake Gemini response whose text is ``payload`` (JSON-encoded unless a str)."""
    response = MagicMock()
    response.text = payload if isinstance(payload, str) else json.dumps(payload)
    return response


@pytest.fixture
def response_factory():
    """Factory for fake Gemini responses."""
    return make_response


@pytest.fixture
def mock_gemini_client():
    """Mock Gemini client for testing."""
    mock_client = MagicMock()

    # Mock the aio.models.generate_content method
    mock_client.aio = MagicMock()
    mock_client.aio.models = MagicMock()
    mock_client.aio.models.generate_content = AsyncMock(
        return_value=make_response("Test response")
    )

    return mock_client


@pytest.fixture
def test_config():
    """Test application configuration."""
    return WayloConfig(
        api=APIConfig(
            gemini_api_key="test-key",
            aws_region="eu-south-1",
            dynamodb_table_name="waylo-test",
        ),
        system=SystemConfig(
            log_level=LogLevel.DEBUG,
            environment="test",
            usage_limit=3,
            free_visible_divisor=4,
        ),
        flow_models={
            "itinerary": FlowModelConfig(temperature=0.7),
            "edit": FlowModelConfig(temperature=0.4),
            "packing": FlowModelConfig(temperature=0.7),
            "chat": FlowModelConfig(temperature=0.8),
        },
    )


@pytest.fixture
def rome_form():
    """Planner form values for a three-day trip to Rome."""
    return {
        "destination": "Rome",
        "dates": {"from": "2025-08-11", "to": "2025-08-13"},
        "interests": "history, food",
        "budget": "medium",
        "traveler_type": "Couple",
        "travel_pace": "Moderate",
        "arrival_time": "10:30",
        "departure_time": "",
    }


def _day(number: int, date_label: str, place: str) -> dict:
    return {
        "day": f"Day {number}: {date_label}",
        "activities": [
            {
                "time": "09:00 - 11:30",
                "kind": "sightseeing",
                "description": f"Visit {place}",
                "details": place,
                "coordinates": {"lat": 41.89, "lng": 12.49},
            },
            {
                "time": "12:30 - 14:00",
                "kind": "meal",
                "description": "Lunch nearby",
                "details": "Trattoria da Enzo",
                "coordinates": {"lat": 41.888, "lng": 12.477},
            },
        ],
    }


@pytest.fixture
def rome_itinerary_payload():
    """A conforming three-day itinerary as Gemini would return it."""
    return {
        "itinerary": [
            _day(1, "11 August", "Colosseum"),
            _day(2, "12 August", "Vatican Museums"),
            _day(3, "13 August", "Pantheon"),
        ],
        "accommodation_suggestions": [
            {
                "name": "Hotel Artemide",
                "zone": "Monti",
                "description": "Central and quiet",
                "coordinates": {"lat": 41.9009, "lng": 12.4935},
            }
        ],
        "potential_issues": "Many museums close on Mondays.",
        "cost_estimates": {
            "accommodation": "120-180 EUR per night",
            "transport": "7 EUR per day",
            "meals": "40-60 EUR per day",
            "activities": "25-40 EUR per day",
        },
        "weather_forecast": "Hot and sunny, 32C. Plan indoor visits in the afternoon.",
        "local_events": "Ferragosto on 15 August; many shops close around it.",
    }


@pytest.fixture
def packing_payload():
    """A packing list with five categories."""
    categories = ["Clothing", "Documents", "Electronics", "Toiletries", "Extras"]
    return {
        "packing_list": [
            {
                "category": name,
                "items": [{"name": f"{name} item", "quantity": "1", "notes": None}],
            }
            for name in categories
        ],
        "general_advice": "Pack light, it will be hot.",
    }
