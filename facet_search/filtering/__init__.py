"""
Filtering module for the faceted search engine.

This module owns the canonical filter state of a search session and infers
additional filters from the semantics of a free-text query.
"""

from .smart_filters import infer, matched_classes
from .state_manager import FilterStateManager, normalize_changes

__all__ = ['FilterStateManager', 'normalize_changes', 'infer', 'matched_classes']
