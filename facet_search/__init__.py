"""
Faceted product search and smart filter engine.

Turns a free-text query plus structured facet selections into search
suggestions, inferred smart filters, a canonical filter state for selecting
catalog entries, and saved searches and presets.
"""

from facet_search.catalog import CatalogIndex, CatalogSelector, build_index
from facet_search.error_handling import (
    CatalogUnavailableError,
    FacetSearchError,
    InvalidFilterError,
    NotAuthenticatedError,
    SavedSearchStorageError,
)
from facet_search.filtering import FilterStateManager, infer
from facet_search.models import (
    CatalogEntry,
    DateRange,
    FacetOption,
    FilterPreset,
    SavedSearch,
    SearchFilters,
    SortBy,
    SortOrder,
    Suggestion,
    SuggestionKind,
)
from facet_search.saved import AuthContext, FILTER_PRESETS, SavedSearchStore
from facet_search.scheduling import Debouncer, debounce
from facet_search.serialization import (
    filters_from_dict,
    filters_from_query_string,
    filters_to_dict,
    filters_to_query_string,
)
from facet_search.session import SearchSession
from facet_search.suggestions import RecentQueries, SuggestionGenerator, generate

__all__ = [
    'AuthContext',
    'CatalogEntry',
    'CatalogIndex',
    'CatalogSelector',
    'CatalogUnavailableError',
    'DateRange',
    'Debouncer',
    'FILTER_PRESETS',
    'FacetOption',
    'FacetSearchError',
    'FilterPreset',
    'FilterStateManager',
    'InvalidFilterError',
    'NotAuthenticatedError',
    'RecentQueries',
    'SavedSearch',
    'SavedSearchStorageError',
    'SavedSearchStore',
    'SearchFilters',
    'SearchSession',
    'SortBy',
    'SortOrder',
    'Suggestion',
    'SuggestionGenerator',
    'SuggestionKind',
    'build_index',
    'debounce',
    'filters_from_dict',
    'filters_from_query_string',
    'filters_to_dict',
    'filters_to_query_string',
    'generate',
    'infer',
]
