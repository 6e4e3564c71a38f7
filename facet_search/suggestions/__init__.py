"""
Suggestion module for the faceted search engine.

This module produces ranked, capped suggestions for an in-progress query and
tracks the recent queries they draw on.
"""

from .generator import SuggestionGenerator, generate, idle_suggestions
from .history import RecentQueries

__all__ = ['SuggestionGenerator', 'generate', 'idle_suggestions', 'RecentQueries']
