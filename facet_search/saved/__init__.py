"""
Saved search module for the faceted search engine.

This module stores user-created filter snapshots behind an authentication
gate and exposes the static filter presets shipped with the engine.
"""

from .presets import FILTER_PRESETS, get_preset
from .repository import (
    SavedSearchRepository,
    InMemorySavedSearchRepository,
    JsonFileSavedSearchRepository,
    create_repository,
)
from .store import AuthContext, SavedSearchStore

__all__ = [
    'FILTER_PRESETS',
    'get_preset',
    'SavedSearchRepository',
    'InMemorySavedSearchRepository',
    'JsonFileSavedSearchRepository',
    'create_repository',
    'AuthContext',
    'SavedSearchStore',
]
