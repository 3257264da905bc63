"""Tests for the rendered plan view."""

import json

from waylo.data.models import ItineraryPlan
from waylo.display.gating import gate_plan
from waylo.display.views import PACKING_UPGRADE_PROMPT, UPGRADE_PROMPT, render_plan_view


def test_free_view_locks_days(rome_plan, packing_list):
    view = render_plan_view(gate_plan(rome_plan, packing_list, is_premium=False))

    days = view["itinerary"]
    assert [d["locked"] for d in days] == [False, True, True]
    assert days[0]["activities"][0]["details"] == "Colosseum"
    assert "activities" not in days[1]
    assert days[1]["upgrade_prompt"] == UPGRADE_PROMPT
    assert view["upgrade_prompt"] == UPGRADE_PROMPT

    categories = view["packing_list"]["categories"]
    assert [c["locked"] for c in categories] == [False, False, True, True, True]
    assert categories[4]["upgrade_prompt"] == PACKING_UPGRADE_PROMPT


def test_saved_view_is_complete(rome_plan, packing_list):
    view = render_plan_view(
        gate_plan(rome_plan, packing_list, is_premium=False, is_saved_trip=True)
    )

    assert not any(d["locked"] for d in view["itinerary"])
    assert "upgrade_prompt" not in view
    assert view["unlocked"] is True


def test_view_map_links(rome_plan, packing_list):
    view = render_plan_view(gate_plan(rome_plan, packing_list, is_premium=True))

    activity = view["itinerary"][0]["activities"][0]
    assert activity["maps_url"].startswith("https://www.google.com/maps/search/?api=1")
    assert "41.89%2C12.49" in activity["maps_url"]
    assert view["accommodation_suggestions"][0]["maps_url"].endswith(
        "query=41.9009%2C12.4935"
    )


def test_view_activity_without_coordinates(rome_itinerary_payload, packing_list):
    del rome_itinerary_payload["itinerary"][0]["activities"][0]["coordinates"]
    plan = ItineraryPlan.model_validate(rome_itinerary_payload)

    view = render_plan_view(gate_plan(plan, packing_list, is_premium=True))

    assert view["itinerary"][0]["activities"][0]["maps_url"] is None


def test_view_is_json_serializable(rome_plan, packing_list):
    view = render_plan_view(gate_plan(rome_plan, packing_list, is_premium=False))

    decoded = json.loads(json.dumps(view))
    assert decoded["cost_estimates"]["meals"] == "40-60 EUR per day"
    assert decoded["local_events"].startswith("Ferragosto")
