"""
Scheduling module for the faceted search engine.

Provides the debounce primitive gating how often suggestions are generated
while the user types.
"""

from .debounce import Debouncer, debounce

__all__ = ['Debouncer', 'debounce']
