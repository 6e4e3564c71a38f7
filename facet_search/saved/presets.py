"""Static filter presets bundled with the engine."""

from types import MappingProxyType
from typing import Tuple

from facet_search.models import FilterPreset, SortBy


FILTER_PRESETS: Tuple[FilterPreset, ...] = (
    FilterPreset(
        name="Best Deals",
        filters=MappingProxyType({"on_sale_only": True, "rating": 4}),
    ),
    FilterPreset(
        name="New & Popular",
        filters=MappingProxyType({"new_arrivals_only": True, "sort_by": SortBy.POPULAR}),
    ),
    FilterPreset(
        name="Premium Products",
        filters=MappingProxyType({"verified_sellers_only": True, "price_range": (100, 1000)}),
    ),
    FilterPreset(
        name="Quick Delivery",
        filters=MappingProxyType({
            "free_shipping_only": True,
            "shipping": frozenset({"Express", "Same Day"}),
        }),
    ),
)


def get_preset(name: str) -> FilterPreset:
    """Look up a preset by name.

    Raises:
        KeyError: If no preset has that name
    """
    for preset in FILTER_PRESETS:
        if preset.name == name:
            return preset
    raise KeyError(name)
