"""Configuration module for the faceted search engine."""

from .engine_config import (
    ENGINE_CONFIG,
    EngineSettings,
    SuggestionConfig,
    FilterConfig,
    SavedSearchConfig,
    RetryConfig,
    get_engine_settings,
)

__all__ = [
    'ENGINE_CONFIG',
    'EngineSettings',
    'SuggestionConfig',
    'FilterConfig',
    'SavedSearchConfig',
    'RetryConfig',
    'get_engine_settings',
]
