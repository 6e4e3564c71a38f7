"""
Suggestion generation for in-progress queries.

Suggestions are assembled in discovery order: product names, then
categories, then brands (both alphabetical), then recent queries in history
order. Recent queries that match are always kept; the other kinds fill the
remaining slots from the front. The result is capped at max_suggestions.
"""

import logging
from typing import Iterable, List, Sequence

from facet_search.catalog.index import CatalogIndex, count_label
from facet_search.models import Suggestion, SuggestionKind


logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 8


class SuggestionGenerator:
    """Generates suggestions from a catalog index and recent queries.

    Attributes:
        min_query_length: Shortest query that produces suggestions
        max_suggestions: Upper bound on returned suggestions
    """

    def __init__(
        self,
        min_query_length: int = MIN_QUERY_LENGTH,
        max_suggestions: int = MAX_SUGGESTIONS
    ):
        self.min_query_length = min_query_length
        self.max_suggestions = max_suggestions

    def generate(
        self,
        query: str,
        index: CatalogIndex,
        recent_queries: Sequence[str] = ()
    ) -> List[Suggestion]:
        """Generate suggestions for a partial query.

        Args:
            query: Text typed so far
            index: Catalog index to match against
            recent_queries: Recent queries, most recent first

        Returns:
            At most max_suggestions suggestions; empty for short queries
        """
        if len(query) < self.min_query_length:
            return []

        needle = query.lower()
        recent = self._recent_matches(needle, recent_queries)
        slots = max(0, self.max_suggestions - len(recent))

        catalog_matches: List[Suggestion] = []
        for suggestion in self._catalog_matches(needle, index):
            if len(catalog_matches) >= slots:
                break
            catalog_matches.append(suggestion)

        suggestions = (catalog_matches + recent)[:self.max_suggestions]
        logger.debug(f"Generated {len(suggestions)} suggestions for {query!r}")
        return suggestions

    def _catalog_matches(self, needle: str, index: CatalogIndex) -> Iterable[Suggestion]:
        seen_names = set()
        for product in index.products:
            if product.name in seen_names or needle not in product.name.lower():
                continue
            seen_names.add(product.name)
            yield Suggestion(
                kind=SuggestionKind.PRODUCT,
                value=product.name,
                label=product.name,
                match_count=1,
            )

        for kind, counts in (
            (SuggestionKind.CATEGORY, index.category_counts),
            (SuggestionKind.BRAND, index.brand_counts),
        ):
            for value in sorted(counts):
                if needle in value.lower():
                    yield Suggestion(
                        kind=kind,
                        value=value,
                        label=count_label(value, counts[value]),
                        match_count=counts[value],
                    )

    def _recent_matches(self, needle: str, recent_queries: Sequence[str]) -> List[Suggestion]:
        matches = []
        seen = set()
        for recent in recent_queries:
            if recent in seen or needle not in recent.lower():
                continue
            seen.add(recent)
            matches.append(query_suggestion(recent, is_recent=True))
        return matches[:self.max_suggestions]


def query_suggestion(query: str, is_recent: bool = False) -> Suggestion:
    return Suggestion(
        kind=SuggestionKind.QUERY,
        value=query,
        label=query,
        is_recent_query=is_recent,
    )


def generate(
    query: str,
    index: CatalogIndex,
    recent_queries: Sequence[str] = ()
) -> List[Suggestion]:
    """Generate suggestions with the default length and cap settings."""
    return SuggestionGenerator().generate(query, index, recent_queries)


def idle_suggestions(
    recent_queries: Sequence[str],
    popular_searches: Sequence[str],
    limit: int = MAX_SUGGESTIONS
) -> List[Suggestion]:
    """Suggestions to show before the user has typed enough to match.

    Recent queries are offered when there are any, popular searches otherwise.
    """
    if recent_queries:
        return [query_suggestion(q, is_recent=True) for q in recent_queries[:limit]]
    return [query_suggestion(q) for q in popular_searches[:limit]]
