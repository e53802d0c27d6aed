"""
Resource & cost model.

Resources are plain ``dict[str, int]`` maps keyed by ResourceType values.
ResourceType is a str Enum, so ``{"TWIG": 1}`` and ``{ResourceType.TWIG: 1}``
address the same entry.

This module owns the payment arithmetic: checking that a set of paid
resources exactly covers a card cost once discounts (CRANE, reserved cards,
associated constructions) and the JUDGE substitution are taken into account.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Mapping

from .errors import MalformedInputError


class ResourceType(str, Enum):
    """Every countable token a player can hold."""
    TWIG = "TWIG"
    RESIN = "RESIN"
    PEBBLE = "PEBBLE"
    BERRY = "BERRY"
    VP = "VP"
    PEARL = "PEARL"


# Resources that can be spent on card costs and picked as "ANY".
BASIC_RESOURCES: tuple[ResourceType, ...] = (
    ResourceType.TWIG,
    ResourceType.RESIN,
    ResourceType.PEBBLE,
    ResourceType.BERRY,
)

# Pseudo-resources used in gain descriptions only.
CARD = "CARD"
ANY = "ANY"


class Discount(str, Enum):
    """Cost reductions that change how a payment is validated."""
    ANY_3 = "ANY 3"
    ANY_1 = "ANY 1"


DISCOUNT_AMOUNTS = {
    Discount.ANY_3: 3,
    Discount.ANY_1: 1,
}


def empty_resources() -> dict[str, int]:
    return {r.value: 0 for r in ResourceType}


def total(resources: Mapping[str, int], only_basic: bool = True) -> int:
    keys = BASIC_RESOURCES if only_basic else tuple(ResourceType)
    return sum(resources.get(r.value, 0) for r in keys)


def parse_resource_map(raw: Any, allowed: tuple[ResourceType, ...] = BASIC_RESOURCES) -> dict[str, int]:
    """
    Validate a client supplied resource map.

    Raises MalformedInputError for anything that is not a mapping of known
    resource names to non-negative integers.
    """
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise MalformedInputError("Resources must be an object of resource -> count")
    allowed_names = {r.value for r in allowed}
    parsed: dict[str, int] = {}
    for key, value in raw.items():
        name = key.value if isinstance(key, ResourceType) else key
        if name not in allowed_names:
            raise MalformedInputError(f"Unexpected resource type: {name}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedInputError(f"Resource count for {name} must be an integer")
        if value < 0:
            raise MalformedInputError(f"Resource count for {name} cannot be negative")
        if value:
            parsed[name] = value
    return parsed


def validate_paid_resources(
    paid: Mapping[str, int],
    cost: Mapping[str, int],
    discount: Discount | None = None,
    has_judge: bool = False,
) -> str | None:
    """
    Check that ``paid`` covers ``cost`` exactly.

    Returns an error message, or None when the payment is acceptable.

    - ANY discounts allow a shortfall up to the discount amount, but the
      payer may not hand over more than the remaining cost.
    - With a JUDGE in the city a single resource may stand in for a
      single missing one.
    """
    cost = {r.value: cost.get(r.value, 0) for r in BASIC_RESOURCES}

    shortfall = 0
    excess = 0
    for resource in BASIC_RESOURCES:
        need = cost[resource.value]
        have = paid.get(resource.value, 0)
        if have < need:
            shortfall += need - have
        else:
            excess += have - need

    total_paid = total(paid)
    total_cost = total(cost)

    if discount in DISCOUNT_AMOUNTS:
        allowance = DISCOUNT_AMOUNTS[discount]
        if shortfall > allowance:
            return "Paid resources is insufficient"
        if total_paid != 0 and total_paid + allowance > total_cost:
            return "Cannot overpay for cards"
        return None

    if shortfall == 0:
        if excess:
            return "Cannot overpay for cards"
        return None

    if has_judge and shortfall == 1 and excess >= 1:
        if excess > 1:
            return "Cannot overpay for cards"
        return None

    return "Paid resources is insufficient"
