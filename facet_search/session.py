"""
Search session facade.

A SearchSession wires the engine components for one user-facing search
box: typing feeds debounced suggestion generation, submitting a query
records it and applies inferred smart filters, and saved searches and
presets feed complete filter states back into the state manager.
"""

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union

from facet_search.catalog.index import CatalogIndex, build_index
from facet_search.catalog.selector import CatalogSelector
from facet_search.config.engine_config import EngineSettings, get_engine_settings
from facet_search.error_handling.error_handler import ErrorHandler
from facet_search.error_handling.errors import CatalogUnavailableError
from facet_search.filtering.smart_filters import infer
from facet_search.filtering.state_manager import FilterStateManager, FiltersCallback, normalize_changes
from facet_search.models import (
    CatalogEntry,
    FilterPreset,
    SavedSearch,
    SearchFilters,
    Suggestion,
    SuggestionKind,
    utc_now,
)
from facet_search.saved.presets import get_preset
from facet_search.saved.repository import create_repository
from facet_search.saved.store import AuthContext, SavedSearchStore
from facet_search.scheduling.debounce import debounce
from facet_search.serialization import filters_to_query_string
from facet_search.suggestions.generator import SuggestionGenerator, idle_suggestions
from facet_search.suggestions.history import RecentQueries


logger = logging.getLogger(__name__)

CatalogInput = Optional[Iterable[Union[CatalogEntry, dict]]]


class SearchSession:
    """One search session: filter state, suggestions, history and saved searches.

    Attributes:
        index: Current catalog index
        state: Filter state manager owning the live SearchFilters
        recent_queries: Submitted query history
        suggestions: Latest generated suggestions
        saved_searches: Saved search store for the session's user
    """

    def __init__(
        self,
        catalog: CatalogInput = None,
        on_filters_change: Optional[FiltersCallback] = None,
        on_suggestions: Optional[Callable[[List[Suggestion]], None]] = None,
        auth: Optional[AuthContext] = None,
        settings: Optional[EngineSettings] = None,
        scheduler: Any = None,
        saved_searches: Optional[SavedSearchStore] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        """Initialize a session.

        Args:
            catalog: Initial catalog entries; None until the catalog is loaded
            on_filters_change: Called with the new filters on every change
            on_suggestions: Called with each newly generated suggestion list
            auth: Authentication state for saved searches
            settings: Engine settings, read from the environment when omitted
            scheduler: Debounce scheduler, the running asyncio loop when omitted
            saved_searches: Saved search store; built from settings when omitted
            clock: Source of the current time, UTC by default
        """
        self.settings = settings or get_engine_settings()
        suggestion_config = self.settings.suggestions
        filter_config = self.settings.filters

        self.index: CatalogIndex = build_index(catalog)
        self.on_suggestions = on_suggestions
        self.suggestions: List[Suggestion] = []

        defaults = SearchFilters(**normalize_changes({
            'price_range': (filter_config.default_price_min, filter_config.default_price_max),
        }))
        self.state = FilterStateManager(on_filters_change=on_filters_change, defaults=defaults)

        self.recent_queries = RecentQueries(limit=suggestion_config.recent_query_limit)
        self.generator = SuggestionGenerator(
            min_query_length=suggestion_config.min_query_length,
            max_suggestions=suggestion_config.max_suggestions,
        )
        self._debounced_suggest = debounce(
            self._refresh_suggestions, suggestion_config.debounce_ms, scheduler=scheduler
        )

        self.selector = CatalogSelector(new_arrival_days=filter_config.new_arrival_days, clock=clock)
        self.error_handler = ErrorHandler(config=self.settings.retry)

        saved_config = self.settings.saved_searches
        self.saved_searches = saved_searches or SavedSearchStore(
            auth=auth or AuthContext(),
            repository=create_repository(saved_config.storage_type, saved_config.base_dir),
            max_saved=saved_config.max_saved,
            clock=clock,
        )

    @property
    def filters(self) -> SearchFilters:
        return self.state.filters

    # Catalog

    def set_catalog(self, catalog: CatalogInput) -> CatalogIndex:
        """Replace the catalog and rebuild the index."""
        self.index = build_index(catalog)
        return self.index

    async def reload_catalog(self, fetch: Callable[[], Awaitable[CatalogInput]]) -> CatalogIndex:
        """Fetch the catalog with retries and rebuild the index.

        The previous index stays in place if every attempt fails.

        Args:
            fetch: Coroutine function returning catalog entries

        Returns:
            The rebuilt index

        Raises:
            CatalogUnavailableError: If the catalog could not be fetched
        """
        try:
            catalog = await self.error_handler.retry_with_backoff(fetch)
        except Exception as e:
            raise CatalogUnavailableError(f"Catalog fetch failed: {e}") from e
        return self.set_catalog(catalog)

    def results(self) -> List[CatalogEntry]:
        """Catalog entries selected and sorted by the current filters."""
        return self.selector.select(self.index.products, self.state.filters)

    # Query input

    def type_query(self, text: str) -> SearchFilters:
        """Handle a keystroke in the search box.

        Updates the query filter immediately and schedules suggestion
        generation once typing pauses. Queries shorter than the minimum
        clear the suggestions instead.
        """
        filters = self.state.update({'query': text})
        if len(text) >= self.generator.min_query_length:
            self._debounced_suggest(text)
        else:
            self._dismiss_suggestions()
        return filters

    def submit_query(self, query: Optional[str] = None) -> SearchFilters:
        """Submit a query: record it and apply any inferred smart filters.

        Args:
            query: Query to submit, the current query filter when omitted

        Returns:
            The resulting filter state
        """
        current = self.state.filters.query
        query = current if query is None else query
        changes = {'query': query} if query != current else {}
        return self._submit(query, changes)

    def select_suggestion(self, suggestion: Suggestion) -> SearchFilters:
        """Apply a suggestion the user picked.

        Category and brand suggestions select that facet and clear the
        query without running smart filters or touching the query history.
        Product and query suggestions are submitted as the query.
        """
        if suggestion.kind == SuggestionKind.CATEGORY:
            facet = 'categories'
        elif suggestion.kind == SuggestionKind.BRAND:
            facet = 'brands'
        else:
            return self._submit(suggestion.value, {'query': suggestion.value})

        self._dismiss_suggestions()
        return self.state.update({'query': "", facet: {suggestion.value}})

    def idle_suggestions(self) -> List[Suggestion]:
        """Suggestions shown before enough has been typed to match."""
        return idle_suggestions(
            self.recent_queries.as_list(),
            self.settings.suggestions.popular_searches,
            limit=self.generator.max_suggestions,
        )

    # Filter state

    def toggle_facet(self, key: str, value: str) -> SearchFilters:
        return self.state.toggle_facet(key, value)

    def update_filters(self, changes: dict) -> SearchFilters:
        return self.state.update(changes)

    def clear_filters(self) -> SearchFilters:
        self._dismiss_suggestions()
        return self.state.clear()

    def apply_preset(self, preset: Union[str, FilterPreset]) -> SearchFilters:
        """Apply a bundled preset, by name or instance."""
        if isinstance(preset, str):
            preset = get_preset(preset)
        logger.info(f"Applying preset '{preset.name}'")
        return self.state.apply_preset(preset.filters)

    def active_filter_count(self) -> int:
        return self.state.active_filter_count()

    def query_string(self) -> str:
        return filters_to_query_string(self.state.filters, defaults=self.state.defaults)

    # Saved searches

    def save_current_search(self, name: str = "", alerts_enabled: bool = False) -> SavedSearch:
        return self.saved_searches.save(name, self.state.filters, alerts_enabled=alerts_enabled)

    def apply_saved_search(self, search_id: str) -> SearchFilters:
        return self.state.replace(self.saved_searches.apply(search_id))

    def close(self) -> None:
        """Tear down the session; no suggestion callback fires afterwards."""
        self._debounced_suggest.cancel()

    def _submit(self, query: str, changes: dict) -> SearchFilters:
        self.recent_queries.record(query)
        self._dismiss_suggestions()

        inferred = infer(query)
        if inferred:
            logger.info(f"Smart filters applied for {query!r}: {sorted(inferred)}")
        changes = {**changes, **inferred}
        # An empty change set must not notify
        if not changes:
            return self.state.filters
        return self.state.update(changes)

    def _refresh_suggestions(self, query: str) -> None:
        self._set_suggestions(
            self.generator.generate(query, self.index, self.recent_queries.as_list())
        )

    def _set_suggestions(self, suggestions: List[Suggestion]) -> None:
        self.suggestions = suggestions
        if self.on_suggestions is not None:
            self.on_suggestions(suggestions)

    def _dismiss_suggestions(self) -> None:
        self._debounced_suggest.cancel()
        self._set_suggestions([])
