"""
In-memory catalog index.

The index is a derived, read-only view over the catalog that is rebuilt in
full whenever the catalog changes.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from facet_search.error_handling.errors import CatalogUnavailableError
from facet_search.models import CatalogEntry, FacetOption


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogIndex:
    """Facet lookups over a catalog snapshot.

    Attributes:
        products: Catalog entries in supplied order
        categories: Distinct category values
        brands: Distinct brand values (brand, or seller name when unbranded)
        sellers: Distinct seller names
        category_counts: Entries per category
        brand_counts: Entries per brand
        seller_counts: Entries per seller
    """
    products: Tuple[CatalogEntry, ...] = ()
    categories: FrozenSet[str] = frozenset()
    brands: FrozenSet[str] = frozenset()
    sellers: FrozenSet[str] = frozenset()
    category_counts: Dict[str, int] = field(default_factory=dict)
    brand_counts: Dict[str, int] = field(default_factory=dict)
    seller_counts: Dict[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.products)

    def is_empty(self) -> bool:
        return not self.products

    def facet_options(self, facet: str) -> List[FacetOption]:
        """List the selectable values of a catalog-derived facet.

        Args:
            facet: One of "category", "brand" or "seller"

        Returns:
            Options sorted by value, labelled with their product counts

        Raises:
            ValueError: If the facet is not derived from the catalog
        """
        counts = {
            'category': self.category_counts,
            'brand': self.brand_counts,
            'seller': self.seller_counts,
        }.get(facet)
        if counts is None:
            raise ValueError(f"Unknown catalog facet: {facet}")

        return [
            FacetOption(value=value, label=count_label(value, count), count=count)
            for value, count in sorted(counts.items())
        ]


def count_label(value: str, count: int) -> str:
    """Format a facet value with its product count, e.g. "Books (3 products)"."""
    return f"{value} ({count} products)"


def build_index(
    catalog: Optional[Iterable[Union[CatalogEntry, dict]]]
) -> CatalogIndex:
    """Build a catalog index in a single pass.

    A missing catalog is treated as unavailable and recovered from by
    returning an empty index.

    Args:
        catalog: Catalog entries, or raw dicts accepted by CatalogEntry.from_dict

    Returns:
        CatalogIndex over the supplied entries
    """
    if catalog is None:
        logger.warning(
            f"{CatalogUnavailableError.__name__}: no catalog supplied, using empty index"
        )
        return CatalogIndex()

    products = []
    category_counts: Counter = Counter()
    brand_counts: Counter = Counter()
    seller_counts: Counter = Counter()

    for item in catalog:
        entry = item if isinstance(item, CatalogEntry) else CatalogEntry.from_dict(item)
        products.append(entry)
        if entry.category:
            category_counts[entry.category] += 1
        if entry.brand_key:
            brand_counts[entry.brand_key] += 1
        if entry.seller_name:
            seller_counts[entry.seller_name] += 1

    index = CatalogIndex(
        products=tuple(products),
        categories=frozenset(category_counts),
        brands=frozenset(brand_counts),
        sellers=frozenset(seller_counts),
        category_counts=dict(category_counts),
        brand_counts=dict(brand_counts),
        seller_counts=dict(seller_counts),
    )
    logger.info(
        f"Indexed {len(products)} products: {len(index.categories)} categories, "
        f"{len(index.brands)} brands"
    )
    return index
