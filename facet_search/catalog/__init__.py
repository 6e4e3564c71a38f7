"""
Catalog module for the faceted search engine.

This module indexes the externally supplied product catalog for facet and
suggestion lookups, and selects/sorts catalog entries against a filter state.
"""

from .index import CatalogIndex, build_index
from .selector import CatalogSelector

__all__ = ['CatalogIndex', 'build_index', 'CatalogSelector']
