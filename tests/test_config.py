"""Tests for configuration module."""

from facet_search.config import (
    ENGINE_CONFIG,
    EngineSettings,
    FilterConfig,
    RetryConfig,
    SavedSearchConfig,
    SuggestionConfig,
    get_engine_settings,
)


def test_engine_config_exists():
    """Test that ENGINE_CONFIG dictionary is properly defined."""
    assert isinstance(ENGINE_CONFIG, dict)
    assert "suggestions" in ENGINE_CONFIG
    assert "filters" in ENGINE_CONFIG
    assert "saved_searches" in ENGINE_CONFIG
    assert "retry" in ENGINE_CONFIG


def test_engine_config_defaults():
    """Test that ENGINE_CONFIG has correct default values."""
    assert ENGINE_CONFIG["suggestions"]["min_query_length"] == 2
    assert ENGINE_CONFIG["suggestions"]["max_suggestions"] == 8
    assert ENGINE_CONFIG["suggestions"]["debounce_ms"] == 300
    assert ENGINE_CONFIG["filters"]["default_price_max"] == 1000
    assert ENGINE_CONFIG["saved_searches"]["max_saved"] == 10
    assert ENGINE_CONFIG["saved_searches"]["storage_type"] == "memory"


def test_get_engine_settings():
    """Test that get_engine_settings returns proper EngineSettings object."""
    settings = get_engine_settings()

    assert isinstance(settings, EngineSettings)

    assert isinstance(settings.suggestions, SuggestionConfig)
    assert settings.suggestions.recent_query_limit == 5
    assert "wireless headphones" in settings.suggestions.popular_searches

    assert isinstance(settings.filters, FilterConfig)
    assert settings.filters.default_price_min == 0
    assert settings.filters.new_arrival_days == 30

    assert isinstance(settings.saved_searches, SavedSearchConfig)
    assert settings.saved_searches.base_dir == "./saved_searches"

    assert isinstance(settings.retry, RetryConfig)
    assert settings.retry.max_retries == 3
    assert settings.retry.backoff_base_seconds == 0.5


def test_engine_settings_with_custom_values():
    """Test creating EngineSettings with custom values."""
    settings = EngineSettings(
        suggestions=SuggestionConfig(max_suggestions=4, debounce_ms=150),
        saved_searches=SavedSearchConfig(storage_type="file", base_dir="/tmp/searches"),
    )

    assert settings.suggestions.max_suggestions == 4
    assert settings.suggestions.debounce_ms == 150
    assert settings.suggestions.min_query_length == 2
    assert settings.saved_searches.storage_type == "file"
    assert settings.filters == FilterConfig()


def test_settings_instances_do_not_share_state():
    first = EngineSettings()
    second = EngineSettings()

    first.suggestions.max_suggestions = 3

    assert second.suggestions.max_suggestions == 8
