"""
Filter state management for a search session.

The FilterStateManager owns the live SearchFilters value. Every accepted
change produces a new immutable value and notifies the change callback
exactly once; a rejected change leaves the state untouched and notifies
no one.
"""

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional

from facet_search.error_handling.errors import InvalidFilterError
from facet_search.models import (
    SET_FIELDS,
    TOGGLE_FIELDS,
    DateRange,
    SearchFilters,
    SortBy,
    SortOrder,
    as_utc,
    parse_timestamp,
)


logger = logging.getLogger(__name__)

FiltersCallback = Callable[[SearchFilters], None]

MIN_RATING = 0
MAX_RATING = 4


class FilterStateManager:
    """Owns and mutates the canonical filter state of one search session.

    Merges are serialized by a re-entrant lock, so concurrent updates never
    interleave and a change callback may itself update the state.

    Attributes:
        on_filters_change: Callback invoked with the new state after every
            accepted mutation
    """

    def __init__(
        self,
        on_filters_change: Optional[FiltersCallback] = None,
        initial_filters: Optional[Mapping[str, Any]] = None,
        defaults: Optional[SearchFilters] = None
    ):
        """Initialize the manager.

        Args:
            on_filters_change: Change notification callback
            initial_filters: Partial overlaid on the defaults at start,
                without notification
            defaults: Baseline state, SearchFilters() when omitted
        """
        self.on_filters_change = on_filters_change
        self._defaults = defaults or SearchFilters()
        self._lock = threading.RLock()
        self._filters = self._defaults
        if initial_filters:
            self._filters = self._merge(self._defaults, initial_filters)

    @property
    def filters(self) -> SearchFilters:
        return self._filters

    @property
    def defaults(self) -> SearchFilters:
        return self._defaults

    def is_default(self) -> bool:
        return self._filters == self._defaults

    def update(self, changes: Mapping[str, Any]) -> SearchFilters:
        """Merge a partial change over the current state.

        Fields are replaced wholesale; set fields are not unioned.

        Args:
            changes: Field name to new value

        Returns:
            The new filter state

        Raises:
            InvalidFilterError: If any change is malformed; nothing is applied
        """
        with self._lock:
            return self._commit(self._merge(self._filters, changes))

    def toggle_facet(self, key: str, value: str) -> SearchFilters:
        """Add a value to a set facet, or remove it when already present.

        Args:
            key: Name of a set facet such as "categories"
            value: Facet value to toggle

        Returns:
            The new filter state

        Raises:
            InvalidFilterError: If key is not a set facet
        """
        if key not in SET_FIELDS:
            raise InvalidFilterError(f"{key} is not a set facet", field=key)

        with self._lock:
            current = getattr(self._filters, key)
            toggled = current - {value} if value in current else current | {value}
            return self.update({key: toggled})

    def clear(self) -> SearchFilters:
        """Reset to the defaults; always notifies."""
        with self._lock:
            logger.info("Filters cleared")
            return self._commit(self._defaults)

    def apply_preset(self, changes: Mapping[str, Any]) -> SearchFilters:
        """Reset to the defaults and overlay a partial in one notification.

        Raises:
            InvalidFilterError: If the partial is malformed; nothing is applied
        """
        with self._lock:
            return self._commit(self._merge(self._defaults, changes))

    def replace(self, filters: SearchFilters) -> SearchFilters:
        """Install a complete filter snapshot, e.g. a re-applied saved search."""
        with self._lock:
            validated = self._merge(self._defaults, {
                name: getattr(filters, name) for name in SearchFilters.field_names()
            })
            return self._commit(validated)

    def active_filter_count(self) -> int:
        """Count the filters that differ from the zero state.

        Only the query, the set facets other than sellers, price range,
        rating, location and four of the boolean toggles are counted.
        local_delivery_only and include_out_of_stock never count.
        """
        f = self._filters
        checks = [
            bool(f.query),
            bool(f.categories),
            f.price_range != self._defaults.price_range,
            f.rating > 0,
            bool(f.condition),
            bool(f.shipping),
            bool(f.brands),
            bool(f.location),
            bool(f.availability),
            bool(f.features),
            f.verified_sellers_only,
            f.free_shipping_only,
            f.new_arrivals_only,
            f.on_sale_only,
        ]
        return sum(1 for active in checks if active)

    def _commit(self, filters: SearchFilters) -> SearchFilters:
        self._filters = filters
        if self.on_filters_change is not None:
            self.on_filters_change(filters)
        return filters

    def _merge(self, base: SearchFilters, changes: Mapping[str, Any]) -> SearchFilters:
        try:
            values = normalize_changes(changes)
        except InvalidFilterError as e:
            logger.warning(f"Rejected filter update: {e}")
            raise
        return replace(base, **values)


def normalize_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate and coerce a partial filter change.

    Negative prices are clamped to 0 and ratings clamped to 0..4. Price and
    date bounds out of order are rejected; naive and aware date bounds are
    compared with naive values taken as UTC.

    Args:
        changes: Field name to raw value

    Returns:
        Field name to coerced value

    Raises:
        InvalidFilterError: For unknown fields or malformed values
    """
    known = set(SearchFilters.field_names())
    values: Dict[str, Any] = {}

    for name, value in changes.items():
        if name not in known:
            raise InvalidFilterError(f"Unknown filter field: {name}", field=name)

        if name in SET_FIELDS:
            values[name] = _coerce_set(name, value)
        elif name in TOGGLE_FIELDS:
            values[name] = bool(value)
        elif name in ('query', 'location'):
            values[name] = "" if value is None else str(value)
        elif name == 'price_range':
            values[name] = _coerce_price_range(value)
        elif name == 'rating':
            values[name] = _coerce_rating(value)
        elif name == 'date_range':
            values[name] = _coerce_date_range(value)
        elif name == 'sort_by':
            values[name] = _coerce_enum(SortBy, name, value)
        elif name == 'sort_order':
            values[name] = _coerce_enum(SortOrder, name, value)
        elif name == 'custom_fields':
            values[name] = dict(value or {})

    return values


def _coerce_set(name: str, value: Any) -> frozenset:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        raise InvalidFilterError(f"{name} expects a collection of values, got a string", field=name)
    try:
        return frozenset(str(item) for item in value)
    except TypeError:
        raise InvalidFilterError(f"{name} expects a collection of values", field=name)


def _coerce_price_range(value: Any) -> tuple:
    try:
        low, high = value
        low, high = float(low), float(high)
    except (TypeError, ValueError):
        raise InvalidFilterError(f"price_range must be a (min, max) pair: {value!r}", field='price_range')

    low, high = max(0.0, low), max(0.0, high)
    if low > high:
        raise InvalidFilterError(
            f"price_range minimum {low} exceeds maximum {high}", field='price_range'
        )
    return (_compact_number(low), _compact_number(high))


def _compact_number(value: float):
    return int(value) if value.is_integer() else value


def _coerce_rating(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidFilterError(f"rating must be a number: {value!r}", field='rating')
    return int(min(MAX_RATING, max(MIN_RATING, value)))


def _coerce_date_range(value: Any) -> DateRange:
    if value is None:
        return DateRange()
    if isinstance(value, DateRange):
        start, end = value.start, value.end
    elif isinstance(value, Mapping):
        start = value.get('start', value.get('from'))
        end = value.get('end', value.get('to'))
    else:
        try:
            start, end = value
        except (TypeError, ValueError):
            raise InvalidFilterError(f"date_range must be a (start, end) pair: {value!r}", field='date_range')

    start, end = _coerce_datetime(start), _coerce_datetime(end)
    if start is not None and end is not None and as_utc(start) > as_utc(end):
        raise InvalidFilterError(f"date_range start {start} is after end {end}", field='date_range')
    return DateRange(start=start, end=end)


def _coerce_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return parse_timestamp(value)
        except ValueError:
            pass
    raise InvalidFilterError(f"Invalid date: {value!r}", field='date_range')


def _coerce_enum(enum_type, name: str, value: Any):
    try:
        return enum_type(value)
    except ValueError:
        raise InvalidFilterError(f"Unknown {name}: {value!r}", field=name)
