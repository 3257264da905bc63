"""
JSON-ready views of a plan.

Turns a GatedPlan into the payload the client renders: visible days with
map links, placeholders for locked days and categories, and the plan's
summary sections.
"""

from typing import Any

from waylo.data.models import (
    AccommodationSuggestion,
    Activity,
    ItineraryDay,
    PackingCategory,
)
from waylo.display.gating import GatedPlan
from waylo.utils.helpers import maps_search_url

UPGRADE_PROMPT = "Upgrade to premium to unlock the full itinerary."
PACKING_UPGRADE_PROMPT = "Upgrade to premium to unlock the full packing list."


def _activity_view(activity: Activity) -> dict[str, Any]:
    view = activity.model_dump(mode="json")
    view["maps_url"] = (
        maps_search_url(activity.coordinates.lat, activity.coordinates.lng)
        if activity.coordinates
        else None
    )
    return view


def _day_view(day: ItineraryDay) -> dict[str, Any]:
    return {
        "day": day.day,
        "locked": False,
        "activities": [_activity_view(a) for a in day.activities],
    }


def _locked_day_view(day: ItineraryDay) -> dict[str, Any]:
    return {"day": day.day, "locked": True, "upgrade_prompt": UPGRADE_PROMPT}


def _accommodation_view(suggestion: AccommodationSuggestion) -> dict[str, Any]:
    view = suggestion.model_dump(mode="json")
    view["maps_url"] = maps_search_url(
        suggestion.coordinates.lat, suggestion.coordinates.lng
    )
    return view


def _category_view(category: PackingCategory) -> dict[str, Any]:
    return {
        "category": category.category,
        "locked": False,
        "items": [item.model_dump(mode="json") for item in category.items],
    }


def _locked_category_view(category: PackingCategory) -> dict[str, Any]:
    return {
        "category": category.category,
        "locked": True,
        "upgrade_prompt": PACKING_UPGRADE_PROMPT,
    }


def render_plan_view(gated: GatedPlan) -> dict[str, Any]:
    """
    Render a gated plan as a JSON-serializable dict.

    Locked entries keep their title so the client can show what is
    withheld, but carry no content.
    """
    plan = gated.plan
    view: dict[str, Any] = {
        "unlocked": gated.unlocked,
        "cost_estimates": plan.cost_estimates.model_dump(mode="json"),
        "itinerary": [_day_view(d) for d in gated.days.visible]
        + [_locked_day_view(d) for d in gated.days.locked],
        "accommodation_suggestions": [
            _accommodation_view(s) for s in plan.accommodation_suggestions
        ],
        "local_events": plan.local_events,
        "potential_issues": plan.potential_issues,
        "weather_forecast": plan.weather_forecast,
        "packing_list": None,
    }

    if gated.packing_list is not None:
        view["packing_list"] = {
            "general_advice": gated.packing_list.general_advice,
            "categories": [_category_view(c) for c in gated.packing_categories.visible]
            + [_locked_category_view(c) for c in gated.packing_categories.locked],
        }

    if not gated.unlocked and (gated.days.is_gated or gated.packing_categories.is_gated):
        view["upgrade_prompt"] = UPGRADE_PROMPT
    return view
