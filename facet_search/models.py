"""
Data models for the faceted search engine.

This module defines the core data structures shared by the catalog index,
the suggestion generator, the filter state manager and the saved search store.
"""

from dataclasses import dataclass, field, fields, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple


class SortBy(str, Enum):
    """Catalog sort keys."""
    RELEVANCE = "relevance"
    PRICE = "price"
    RATING = "rating"
    NEWEST = "newest"
    POPULAR = "popular"
    DISCOUNT = "discount"
    SALES = "sales"
    REVIEWS = "reviews"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SuggestionKind(str, Enum):
    PRODUCT = "product"
    CATEGORY = "category"
    BRAND = "brand"
    QUERY = "query"


DEFAULT_PRICE_RANGE: Tuple[float, float] = (0, 1000)

# Facet fields holding a set of string values
SET_FIELDS = (
    'categories',
    'brands',
    'sellers',
    'condition',
    'shipping',
    'availability',
    'features',
)

TOGGLE_FIELDS = (
    'include_out_of_stock',
    'verified_sellers_only',
    'free_shipping_only',
    'new_arrivals_only',
    'on_sale_only',
    'local_delivery_only',
)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Convert a datetime to aware UTC; naive values are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, including the "Z" suffix.

    Raises:
        ValueError: If the string is not ISO-8601
    """
    if value.endswith(('Z', 'z')):
        value = value[:-1] + '+00:00'
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class DateRange:
    """Optional inclusive date bounds.

    Attributes:
        start: Lower bound, None for unbounded
        end: Upper bound, None for unbounded
    """
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def is_set(self) -> bool:
        return self.start is not None or self.end is not None

    def contains(self, moment: Optional[datetime]) -> bool:
        """Check whether a timestamp falls within the bounds.

        An unset range contains everything, including a missing timestamp.
        A set range never contains a missing timestamp. Naive datetimes are
        taken to be UTC.
        """
        if not self.is_set():
            return True
        if moment is None:
            return False
        moment = as_utc(moment)
        if self.start is not None and moment < as_utc(self.start):
            return False
        if self.end is not None and moment > as_utc(self.end):
            return False
        return True


@dataclass(frozen=True)
class SearchFilters:
    """Canonical filter state for a search session.

    Instances are immutable; the filter state manager produces a new value
    for every accepted change. A default-constructed instance is the zero
    state used as the baseline for the active filter count.

    Attributes:
        query: Free-text search term
        categories: Selected category values
        brands: Selected brand values
        sellers: Selected seller names
        condition: Selected item conditions ("new", "used", ...)
        shipping: Selected shipping options ("Express", "Same Day", ...)
        availability: Selected availability states ("In Stock", ...)
        features: Selected product features ("Best Seller", ...)
        price_range: Inclusive (min, max) price bounds
        rating: Minimum star rating, 0 to 4
        location: Free-text location filter
        date_range: Listing date bounds
        sort_by: Sort key
        sort_order: Sort direction
        include_out_of_stock: Keep out-of-stock entries in the selection
        verified_sellers_only: Restrict to verified sellers
        free_shipping_only: Restrict to entries offering free shipping
        new_arrivals_only: Restrict to recently listed entries
        on_sale_only: Restrict to discounted entries
        local_delivery_only: Restrict to entries with local delivery
        custom_fields: Opaque extension values; compared but not hashed
    """
    query: str = ""
    categories: FrozenSet[str] = frozenset()
    brands: FrozenSet[str] = frozenset()
    sellers: FrozenSet[str] = frozenset()
    condition: FrozenSet[str] = frozenset()
    shipping: FrozenSet[str] = frozenset()
    availability: FrozenSet[str] = frozenset()
    features: FrozenSet[str] = frozenset()
    price_range: Tuple[float, float] = DEFAULT_PRICE_RANGE
    rating: int = 0
    location: str = ""
    date_range: DateRange = DateRange()
    sort_by: SortBy = SortBy.RELEVANCE
    sort_order: SortOrder = SortOrder.DESC
    include_out_of_stock: bool = False
    verified_sellers_only: bool = False
    free_shipping_only: bool = False
    new_arrivals_only: bool = False
    on_sale_only: bool = False
    local_delivery_only: bool = False
    custom_fields: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def to_dict(self) -> dict:
        """Convert filters to a JSON-compatible dictionary.

        Sets become sorted lists, enums their values and datetimes
        ISO-8601 strings.

        Returns:
            Dictionary representation of the filters
        """
        data = {}
        for name in self.field_names():
            value = getattr(self, name)
            if name in SET_FIELDS:
                data[name] = sorted(value)
            elif name == 'price_range':
                data[name] = [value[0], value[1]]
            elif name == 'date_range':
                data[name] = {
                    'from': value.start.isoformat() if value.start else None,
                    'to': value.end.isoformat() if value.end else None,
                }
            elif isinstance(value, Enum):
                data[name] = value.value
            elif name == 'custom_fields':
                data[name] = dict(value)
            else:
                data[name] = value
        return data


@dataclass(frozen=True)
class CatalogEntry:
    """A read-only product in the catalog.

    Only id, name, category and price are required; the rest describe the
    attributes the catalog selector filters and sorts on.
    """
    id: str
    name: str
    category: str
    price: float
    rating: float = 0.0
    brand: Optional[str] = None
    seller_name: str = ""
    description: str = ""
    tags: Tuple[str, ...] = ()
    condition: str = "new"
    in_stock: bool = True
    availability: Optional[str] = None
    shipping_options: FrozenSet[str] = frozenset()
    features: FrozenSet[str] = frozenset()
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    discount_price: Optional[float] = None
    review_count: int = 0
    sales_count: int = 0
    verified_seller: bool = False
    local_delivery: bool = False

    @property
    def brand_key(self) -> str:
        """Value used for the brand facet, falling back to the seller name."""
        return self.brand or self.seller_name

    @property
    def effective_price(self) -> float:
        """Price the customer pays, honoring a discount when present."""
        if self.discount_price is not None:
            return self.discount_price
        return self.price

    @property
    def availability_status(self) -> str:
        if self.availability:
            return self.availability
        return "In Stock" if self.in_stock else "Out of Stock"

    @property
    def discount_percent(self) -> float:
        if self.discount_price is None or not self.price:
            return 0.0
        return (self.price - self.discount_price) / self.price * 100

    @property
    def is_on_sale(self) -> bool:
        return self.discount_price is not None and self.discount_price < self.price

    def to_dict(self) -> dict:
        data = asdict(self)
        data['tags'] = list(self.tags)
        data['shipping_options'] = sorted(self.shipping_options)
        data['features'] = sorted(self.features)
        data['created_at'] = self.created_at.isoformat() if self.created_at else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'CatalogEntry':
        """Create a CatalogEntry from an externally supplied dictionary.

        Accepts the camelCase keys used by the catalog API (``sellerName``,
        ``discountPrice``, ...) as well as the attribute names. Unknown keys
        are ignored. Missing or null text fields become empty strings, a
        missing price becomes 0 and ``created_at`` is converted to UTC.

        Args:
            data: Dictionary describing the product

        Returns:
            CatalogEntry instance
        """
        aliases = {
            'sellerName': 'seller_name',
            'inStock': 'in_stock',
            'shippingOptions': 'shipping_options',
            'createdAt': 'created_at',
            'discountPrice': 'discount_price',
            'reviewCount': 'review_count',
            'salesCount': 'sales_count',
            'verifiedSeller': 'verified_seller',
            'localDelivery': 'local_delivery',
        }
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name in known:
                values[name] = value

        values['id'] = '' if values.get('id') is None else str(values['id'])
        for name in ('name', 'category', 'seller_name', 'description'):
            if values.get(name) is None:
                values[name] = ""
        if values.get('price') is None:
            values['price'] = 0

        created_at = values.get('created_at')
        if isinstance(created_at, str):
            created_at = parse_timestamp(created_at)
        if created_at is not None:
            values['created_at'] = as_utc(created_at)
        for name in ('shipping_options', 'features'):
            if name in values:
                values[name] = frozenset(values[name] or ())
        if 'tags' in values:
            values['tags'] = tuple(values['tags'] or ())
        return cls(**values)


@dataclass(frozen=True)
class FacetOption:
    """A selectable facet value annotated with its catalog count."""
    value: str
    label: str
    count: int


@dataclass(frozen=True)
class Suggestion:
    """A candidate completion or refinement for an in-progress query.

    Attributes:
        kind: What the suggestion refers to
        value: Value applied when the suggestion is selected
        label: Display text
        match_count: Number of catalog entries behind the suggestion
        is_recent_query: Whether it comes from the user's recent queries
    """
    kind: SuggestionKind
    value: str
    label: str
    match_count: Optional[int] = None
    is_recent_query: bool = False


@dataclass
class SavedSearch:
    """A user-created, named snapshot of filter state.

    Attributes:
        id: Unique identifier
        name: Display name
        filters: Stored filter snapshot
        alerts_enabled: Whether new-match alerts are enabled
        created_at: When the search was saved
        last_used_at: When the search was last applied
    """
    id: str
    name: str
    filters: SearchFilters
    alerts_enabled: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    last_used_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'filters': self.filters.to_dict(),
            'alerts_enabled': self.alerts_enabled,
            'created_at': self.created_at.isoformat(),
            'last_used_at': self.last_used_at.isoformat(),
        }


@dataclass(frozen=True)
class FilterPreset:
    """A static, named bundle of filter values shipped with the engine."""
    name: str
    filters: Mapping[str, Any]
