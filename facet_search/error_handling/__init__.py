"""
Error handling module for the faceted search engine.

Provides the engine's exception hierarchy and retry logic for external
collaborators such as catalog loaders.
"""

from .errors import (
    FacetSearchError,
    InvalidFilterError,
    NotAuthenticatedError,
    CatalogUnavailableError,
    SavedSearchStorageError,
)
from .error_handler import ErrorHandler, RetryConfig

__all__ = [
    'FacetSearchError',
    'InvalidFilterError',
    'NotAuthenticatedError',
    'CatalogUnavailableError',
    'SavedSearchStorageError',
    'ErrorHandler',
    'RetryConfig',
]
