"""
Smart filter inference from free-text queries.

Keyword classes are evaluated in a fixed order and each matching class
writes its filter values into the result, so a later class overwrites a
field set by an earlier one (e.g. "best deals under $50" matches budget
then quality, and quality's sort_by=rating wins).
"""

import re
from typing import Any, Dict, List, Pattern, Tuple

from facet_search.models import SortBy, SortOrder


def _keyword_pattern(keywords: List[str]) -> Pattern:
    # Whole words only: "laptop" must not trigger "top"
    alternatives = "|".join(
        r"\s+".join(re.escape(part) for part in keyword.split())
        for keyword in keywords
    )
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


BUDGET = _keyword_pattern(["cheap", "budget", "affordable", "under"])
PREMIUM = _keyword_pattern(["premium", "luxury", "expensive", "high-end"])

# Evaluated in order after the price class
KEYWORD_RULES: Tuple[Tuple[str, Pattern, Dict[str, Any]], ...] = (
    (
        "quality",
        _keyword_pattern(["best", "top", "highest rated", "excellent"]),
        {"rating": 4, "sort_by": SortBy.RATING},
    ),
    (
        "speed",
        _keyword_pattern(["fast", "quick", "express", "urgent"]),
        {"free_shipping_only": True, "shipping": frozenset({"Express", "Same Day"})},
    ),
    (
        "recency",
        _keyword_pattern(["new", "latest", "trending", "recent"]),
        {"new_arrivals_only": True, "sort_by": SortBy.NEWEST},
    ),
    (
        "discount",
        _keyword_pattern(["sale", "discount", "deal", "offer"]),
        {"on_sale_only": True, "sort_by": SortBy.DISCOUNT},
    ),
)


def matched_classes(query: str) -> List[str]:
    """Names of the keyword classes a query triggers, in evaluation order."""
    matched = []
    if BUDGET.search(query):
        matched.append("budget")
    elif PREMIUM.search(query):
        matched.append("premium")
    for name, pattern, _ in KEYWORD_RULES:
        if pattern.search(query):
            matched.append(name)
    return matched


def infer(query: str) -> Dict[str, Any]:
    """Infer filter changes from keywords in a query.

    Budget and premium form a single price class: premium only applies
    when no budget keyword is present.

    Args:
        query: Free-text query

    Returns:
        Partial filter changes; empty when nothing matches
    """
    changes: Dict[str, Any] = {}

    if BUDGET.search(query):
        changes["price_range"] = (0, 50)
        changes["sort_by"] = SortBy.PRICE
        changes["sort_order"] = SortOrder.ASC
    elif PREMIUM.search(query):
        changes["price_range"] = (200, 1000)
        changes["verified_sellers_only"] = True

    for _, pattern, values in KEYWORD_RULES:
        if pattern.search(query):
            changes.update(values)

    return changes
