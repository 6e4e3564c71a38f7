"""
Serialization of filter state.

SearchFilters round-trip through plain JSON-compatible dictionaries (sets as
sorted lists, datetimes as ISO-8601 strings) and through URL query strings.
Inbound payloads are validated with pydantic before they reach the filter
state rules.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, quote_plus, urlencode

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from facet_search.error_handling.errors import InvalidFilterError
from facet_search.filtering.state_manager import normalize_changes
from facet_search.models import SET_FIELDS, TOGGLE_FIELDS, SavedSearch, SearchFilters, SortBy, SortOrder


class DateRangePayload(BaseModel):
    """Serialized date bounds, keyed "from" and "to"."""
    model_config = ConfigDict(populate_by_name=True, extra='forbid')

    start: Optional[datetime] = Field(default=None, alias='from')
    end: Optional[datetime] = Field(default=None, alias='to')


class SearchFiltersPayload(BaseModel):
    """Wire shape of SearchFilters; every field is optional."""
    model_config = ConfigDict(extra='forbid')

    query: str = ""
    categories: List[str] = []
    brands: List[str] = []
    sellers: List[str] = []
    condition: List[str] = []
    shipping: List[str] = []
    availability: List[str] = []
    features: List[str] = []
    price_range: Tuple[float, float] = (0, 1000)
    rating: float = 0
    location: str = ""
    date_range: DateRangePayload = DateRangePayload()
    sort_by: SortBy = SortBy.RELEVANCE
    sort_order: SortOrder = SortOrder.DESC
    include_out_of_stock: bool = False
    verified_sellers_only: bool = False
    free_shipping_only: bool = False
    new_arrivals_only: bool = False
    on_sale_only: bool = False
    local_delivery_only: bool = False
    custom_fields: Dict[str, Any] = {}


class SavedSearchPayload(BaseModel):
    model_config = ConfigDict(extra='ignore')

    id: str
    name: str
    filters: Dict[str, Any]
    alerts_enabled: bool = False
    created_at: datetime
    last_used_at: datetime


def filters_to_dict(filters: SearchFilters) -> dict:
    return filters.to_dict()


def filters_from_dict(
    data: Dict[str, Any],
    defaults: Optional[SearchFilters] = None
) -> SearchFilters:
    """Rebuild filters from a serialized dictionary.

    Fields missing from the payload take their default values.

    Args:
        data: Dictionary produced by filters_to_dict or an equivalent client
        defaults: Baseline for missing fields, SearchFilters() when omitted

    Returns:
        SearchFilters instance

    Raises:
        InvalidFilterError: If the payload is malformed
    """
    try:
        payload = SearchFiltersPayload.model_validate(data)
    except ValidationError as e:
        raise InvalidFilterError(f"Malformed filter payload: {e}")

    changes = payload.model_dump(exclude_unset=True)
    return replace(defaults or SearchFilters(), **normalize_changes(changes))


def saved_search_from_dict(data: Dict[str, Any]) -> SavedSearch:
    """Rebuild a saved search from SavedSearch.to_dict output.

    Raises:
        InvalidFilterError: If the record or its filters are malformed
    """
    try:
        payload = SavedSearchPayload.model_validate(data)
    except ValidationError as e:
        raise InvalidFilterError(f"Malformed saved search record: {e}")

    return SavedSearch(
        id=payload.id,
        name=payload.name,
        filters=filters_from_dict(payload.filters),
        alerts_enabled=payload.alerts_enabled,
        created_at=payload.created_at,
        last_used_at=payload.last_used_at,
    )


def filters_to_query_string(
    filters: SearchFilters,
    defaults: Optional[SearchFilters] = None
) -> str:
    """Encode the non-default fields of a filter state as a query string.

    Set facets become repeated parameters. custom_fields are not encoded.

    Examples:
        >>> filters_to_query_string(SearchFilters(query="usb hub", rating=4))
        'q=usb+hub&rating=4'
    """
    defaults = defaults or SearchFilters()
    params: List[Tuple[str, str]] = []

    if filters.query != defaults.query:
        params.append(('q', filters.query))
    for name in SET_FIELDS:
        if getattr(filters, name) != getattr(defaults, name):
            params.extend((name, value) for value in sorted(getattr(filters, name)))
    if filters.price_range != defaults.price_range:
        params.append(('price_min', _format_number(filters.price_range[0])))
        params.append(('price_max', _format_number(filters.price_range[1])))
    if filters.rating != defaults.rating:
        params.append(('rating', str(filters.rating)))
    if filters.location != defaults.location:
        params.append(('location', filters.location))
    if filters.date_range.start is not None:
        params.append(('from', filters.date_range.start.isoformat()))
    if filters.date_range.end is not None:
        params.append(('to', filters.date_range.end.isoformat()))
    if filters.sort_by != defaults.sort_by:
        params.append(('sort', filters.sort_by.value))
    if filters.sort_order != defaults.sort_order:
        params.append(('order', filters.sort_order.value))
    for name in TOGGLE_FIELDS:
        if getattr(filters, name) != getattr(defaults, name):
            params.append((name, '1' if getattr(filters, name) else '0'))

    # quote_via=quote_plus converts spaces to + instead of %20
    return urlencode(params, quote_via=quote_plus)


def filters_from_query_string(
    query_string: str,
    defaults: Optional[SearchFilters] = None
) -> SearchFilters:
    """Decode a query string produced by filters_to_query_string.

    Unknown parameters are ignored.

    Raises:
        InvalidFilterError: If a known parameter carries a malformed value
    """
    params = parse_qs(query_string.lstrip('?'), keep_blank_values=True)
    data: Dict[str, Any] = {}

    if 'q' in params:
        data['query'] = params['q'][-1]
    for name in SET_FIELDS:
        if name in params:
            data[name] = params[name]
    if 'price_min' in params or 'price_max' in params:
        base = (defaults or SearchFilters()).price_range
        data['price_range'] = (
            params.get('price_min', [base[0]])[-1],
            params.get('price_max', [base[1]])[-1],
        )
    if 'rating' in params:
        data['rating'] = params['rating'][-1]
    if 'location' in params:
        data['location'] = params['location'][-1]
    if 'from' in params or 'to' in params:
        data['date_range'] = {
            'from': params.get('from', [None])[-1],
            'to': params.get('to', [None])[-1],
        }
    if 'sort' in params:
        data['sort_by'] = params['sort'][-1]
    if 'order' in params:
        data['sort_order'] = params['order'][-1]
    for name in TOGGLE_FIELDS:
        if name in params:
            data[name] = params[name][-1] in ('1', 'true')

    return filters_from_dict(data, defaults=defaults)


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
