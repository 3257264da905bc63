"""Tests for free-tier content gating."""

import math

import pytest

from waylo.data.models import ItineraryPlan
from waylo.display.gating import gate_items, gate_plan, is_unlocked, visible_count


@pytest.mark.parametrize("total", range(0, 13))
def test_visible_count_free(total):
    assert visible_count(total, unlocked=False) == math.ceil(total / 4)


@pytest.mark.parametrize("total", range(0, 13))
def test_visible_count_unlocked(total):
    assert visible_count(total, unlocked=True) == total


def test_visible_count_custom_divisor():
    assert visible_count(7, unlocked=False, divisor=2) == 4


def test_is_unlocked():
    assert is_unlocked(is_premium=True, is_saved_trip=False)
    assert is_unlocked(is_premium=False, is_saved_trip=True)
    assert not is_unlocked(is_premium=False, is_saved_trip=False)


def test_gate_items_splits_in_order():
    section = gate_items(["a", "b", "c", "d", "e"], unlocked=False)

    assert section.visible == ("a", "b")
    assert section.locked == ("c", "d", "e")
    assert section.total == 5
    assert section.is_gated


def test_gate_items_empty():
    section = gate_items([], unlocked=False)

    assert section.visible == ()
    assert not section.is_gated


def _plan_with_days(plan: ItineraryPlan, days: int) -> ItineraryPlan:
    template = plan.itinerary[0]
    return plan.model_copy(
        update={
            "itinerary": [
                template.model_copy(update={"day": f"Day {n + 1}"}) for n in range(days)
            ]
        }
    )


@pytest.mark.parametrize("days", [0, 1, 3, 4, 5, 8, 9])
def test_gate_plan_free_account(rome_plan, packing_list, days):
    plan = _plan_with_days(rome_plan, days)

    gated = gate_plan(plan, packing_list, is_premium=False)

    assert len(gated.days.visible) == math.ceil(days / 4)
    assert gated.days.total == days
    # Five packing categories, gated independently of the days
    assert len(gated.packing_categories.visible) == 2
    assert not gated.unlocked


@pytest.mark.parametrize(
    "is_premium,is_saved_trip", [(True, False), (False, True), (True, True)]
)
def test_gate_plan_unlocked(rome_plan, packing_list, is_premium, is_saved_trip):
    plan = _plan_with_days(rome_plan, 9)

    gated = gate_plan(plan, packing_list, is_premium, is_saved_trip)

    assert len(gated.days.visible) == 9
    assert gated.days.locked == ()
    assert len(gated.packing_categories.visible) == 5


def test_gate_plan_does_not_mutate(rome_plan, packing_list):
    before_plan = rome_plan.model_dump()
    before_packing = packing_list.model_dump()

    gate_plan(rome_plan, packing_list, is_premium=False)

    assert rome_plan.model_dump() == before_plan
    assert packing_list.model_dump() == before_packing


def test_gate_plan_without_packing_list(rome_plan):
    gated = gate_plan(rome_plan, None, is_premium=False)

    assert gated.packing_list is None
    assert gated.packing_categories.total == 0
