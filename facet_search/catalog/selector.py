"""
Catalog selection against a filter state.

This module applies a SearchFilters value to catalog entries: every active
facet and toggle narrows the selection independently (logical AND), then
the result is ordered by the requested sort key.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional

from facet_search.constants import FREE_SHIPPING, IN_STOCK_STATES
from facet_search.models import CatalogEntry, SearchFilters, SortBy, SortOrder, as_utc, utc_now


EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


class CatalogSelector:
    """Filters and sorts catalog entries for a filter state.

    Attributes:
        new_arrival_days: Age limit for entries counted as new arrivals
        clock: Callable returning the current time; naive results are
            taken to be UTC
    """

    def __init__(
        self,
        new_arrival_days: int = 30,
        clock: Callable[[], datetime] = utc_now
    ):
        self.new_arrival_days = new_arrival_days
        self.clock = clock

    def select(
        self,
        entries: Iterable[CatalogEntry],
        filters: SearchFilters
    ) -> List[CatalogEntry]:
        """Select and order the entries matching a filter state.

        Args:
            entries: Catalog entries to select from
            filters: Filter state to apply

        Returns:
            Matching entries in sort order
        """
        now = self.clock()
        selected = [entry for entry in entries if self.matches(entry, filters, now)]
        return self.sort(selected, filters.sort_by, filters.sort_order)

    def matches(
        self,
        entry: CatalogEntry,
        filters: SearchFilters,
        now: Optional[datetime] = None
    ) -> bool:
        """Check a single entry against every active constraint."""
        if filters.query and not self._matches_query(entry, filters.query):
            return False

        if filters.categories and entry.category not in filters.categories:
            return False
        if filters.brands and entry.brand_key not in filters.brands:
            return False
        if filters.sellers and entry.seller_name not in filters.sellers:
            return False
        if filters.condition and (entry.condition or "new") not in filters.condition:
            return False
        if filters.shipping and not (filters.shipping & entry.shipping_options):
            return False
        if filters.availability and entry.availability_status not in filters.availability:
            return False
        if filters.features and not (filters.features & entry.features):
            return False

        low, high = filters.price_range
        if not low <= entry.effective_price <= high:
            return False
        if filters.rating > 0 and entry.rating < filters.rating:
            return False

        if filters.location:
            if not entry.location or filters.location.lower() not in entry.location.lower():
                return False
        if not filters.date_range.contains(entry.created_at):
            return False

        if not filters.include_out_of_stock and not self._is_in_stock(entry):
            return False
        if filters.verified_sellers_only and not entry.verified_seller:
            return False
        if filters.free_shipping_only and FREE_SHIPPING not in entry.shipping_options:
            return False
        if filters.new_arrivals_only and not self._is_new_arrival(entry, now or self.clock()):
            return False
        if filters.on_sale_only and not entry.is_on_sale:
            return False
        if filters.local_delivery_only and not entry.local_delivery:
            return False

        return True

    def sort(
        self,
        entries: List[CatalogEntry],
        sort_by: SortBy,
        sort_order: SortOrder = SortOrder.DESC
    ) -> List[CatalogEntry]:
        """Order entries by a sort key.

        Relevance keeps the supplied order. The sort is stable, so ties keep
        their relative order too.
        """
        if sort_by == SortBy.RELEVANCE:
            return list(entries)

        keys = {
            SortBy.PRICE: lambda e: e.effective_price,
            SortBy.RATING: lambda e: e.rating,
            SortBy.NEWEST: _newest_key,
            SortBy.POPULAR: lambda e: e.review_count,
            SortBy.DISCOUNT: lambda e: e.discount_percent,
            SortBy.SALES: lambda e: e.sales_count,
            SortBy.REVIEWS: lambda e: e.review_count,
        }
        return sorted(entries, key=keys[sort_by], reverse=sort_order == SortOrder.DESC)

    def _matches_query(self, entry: CatalogEntry, query: str) -> bool:
        """Case-insensitive substring match over the entry's text fields."""
        needle = query.lower()
        haystacks = [entry.name, entry.description, entry.category, entry.brand_key]
        haystacks.extend(entry.tags)
        return any(needle in text.lower() for text in haystacks if text)

    def _is_in_stock(self, entry: CatalogEntry) -> bool:
        if entry.availability:
            return entry.availability in IN_STOCK_STATES
        return entry.in_stock

    def _is_new_arrival(self, entry: CatalogEntry, now: datetime) -> bool:
        if entry.created_at is None:
            return False
        return as_utc(entry.created_at) >= as_utc(now) - timedelta(days=self.new_arrival_days)


def _newest_key(entry: CatalogEntry):
    # Undated entries rank as the oldest
    if entry.created_at is None:
        return (False, EARLIEST)
    return (True, as_utc(entry.created_at))
