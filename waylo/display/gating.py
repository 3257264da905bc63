"""
Content gating for free accounts.

Free accounts see the first quarter (rounded up) of the itinerary days
and packing categories; premium accounts and saved trips see everything.
Everything here is pure: inputs are never mutated.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from waylo.data.models import ItineraryDay, ItineraryPlan, PackingCategory, PackingList

T = TypeVar("T")

DEFAULT_VISIBLE_DIVISOR = 4


@dataclass(frozen=True)
class GatedSection(Generic[T]):
    """A list split into the part shown and the part withheld."""

    visible: tuple[T, ...]
    locked: tuple[T, ...]

    @property
    def total(self) -> int:
        return len(self.visible) + len(self.locked)

    @property
    def is_gated(self) -> bool:
        return bool(self.locked)


@dataclass(frozen=True)
class GatedPlan:
    """An itinerary and packing list with gating applied to each."""

    plan: ItineraryPlan
    days: GatedSection[ItineraryDay]
    packing_list: PackingList | None
    packing_categories: GatedSection[PackingCategory]
    unlocked: bool


def visible_count(
    total: int, unlocked: bool, divisor: int = DEFAULT_VISIBLE_DIVISOR
) -> int:
    """Number of entries a viewer may see out of ``total``."""
    if total <= 0:
        return 0
    if unlocked:
        return total
    return math.ceil(total / divisor)


def gate_items(
    items: Sequence[T], unlocked: bool, divisor: int = DEFAULT_VISIBLE_DIVISOR
) -> GatedSection[T]:
    count = visible_count(len(items), unlocked, divisor)
    return GatedSection(visible=tuple(items[:count]), locked=tuple(items[count:]))


def is_unlocked(is_premium: bool, is_saved_trip: bool) -> bool:
    """Saved trips are always shown in full, whatever the account tier."""
    return is_saved_trip or is_premium


def gate_plan(
    plan: ItineraryPlan,
    packing_list: PackingList | None,
    is_premium: bool,
    is_saved_trip: bool = False,
    divisor: int = DEFAULT_VISIBLE_DIVISOR,
) -> GatedPlan:
    """
    Apply the gating policy to a plan.

    Days and packing categories are gated independently, each with the
    same rule.

    Args:
        plan: The generated itinerary
        packing_list: The generated packing list, if any
        is_premium: Whether the viewer has a premium account
        is_saved_trip: Whether the plan is being shown from saved trips
        divisor: Fraction denominator of the free preview

    Returns:
        The gated plan
    """
    unlocked = is_unlocked(is_premium, is_saved_trip)
    categories = packing_list.packing_list if packing_list else []
    return GatedPlan(
        plan=plan,
        days=gate_items(plan.itinerary, unlocked, divisor),
        packing_list=packing_list,
        packing_categories=gate_items(categories, unlocked, divisor),
        unlocked=unlocked,
    )
