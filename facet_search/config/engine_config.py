"""Engine configuration settings for the faceted search engine."""

from dataclasses import dataclass, field
from typing import Tuple
import os

from dotenv import load_dotenv

load_dotenv()


DEFAULT_POPULAR_SEARCHES = (
    "wireless headphones",
    "smartphone case",
    "laptop stand",
    "fitness tracker",
    "coffee maker",
)


@dataclass
class SuggestionConfig:
    """Suggestion generation configuration."""
    min_query_length: int = 2
    max_suggestions: int = 8
    debounce_ms: int = 300
    recent_query_limit: int = 5
    popular_searches: Tuple[str, ...] = DEFAULT_POPULAR_SEARCHES


@dataclass
class FilterConfig:
    """Filter defaults and catalog selection configuration."""
    default_price_min: float = 0
    default_price_max: float = 1000
    new_arrival_days: int = 30


@dataclass
class SavedSearchConfig:
    """Saved search persistence configuration."""
    max_saved: int = 10
    storage_type: str = "memory"
    base_dir: str = "./saved_searches"


@dataclass
class RetryConfig:
    """
    Retry configuration for external collaborators.

    Attributes:
        max_retries: Maximum number of attempts
        backoff_base_seconds: Delay before the first retry
    """
    max_retries: int = 3
    backoff_base_seconds: float = 0.5

    def get_backoff_delay(self, attempt: int) -> float:
        """
        Calculate backoff delay before retry attempt.

        delay = backoff_base_seconds * (2 ^ attempt)

        Args:
            attempt: The retry attempt number (0-indexed)

        Returns:
            Delay in seconds before the retry attempt
        """
        return self.backoff_base_seconds * (2 ** attempt)


@dataclass
class EngineSettings:
    """Main engine configuration settings."""
    suggestions: SuggestionConfig = field(default_factory=SuggestionConfig)
    filters: FilterConfig = field(default_factory=FilterConfig)
    saved_searches: SavedSearchConfig = field(default_factory=SavedSearchConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)


def _split_list(raw: str) -> Tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


# Default engine configuration
ENGINE_CONFIG = {
    "suggestions": {
        "min_query_length": int(os.getenv("SUGGESTION_MIN_QUERY_LENGTH", "2")),
        "max_suggestions": int(os.getenv("SUGGESTION_MAX_RESULTS", "8")),
        "debounce_ms": int(os.getenv("SUGGESTION_DEBOUNCE_MS", "300")),
        "recent_query_limit": int(os.getenv("RECENT_QUERY_LIMIT", "5")),
        "popular_searches": _split_list(
            os.getenv("POPULAR_SEARCHES", ",".join(DEFAULT_POPULAR_SEARCHES))
        ),
    },
    "filters": {
        "default_price_min": float(os.getenv("DEFAULT_PRICE_MIN", "0")),
        "default_price_max": float(os.getenv("DEFAULT_PRICE_MAX", "1000")),
        "new_arrival_days": int(os.getenv("NEW_ARRIVAL_DAYS", "30")),
    },
    "saved_searches": {
        "max_saved": int(os.getenv("MAX_SAVED_SEARCHES", "10")),
        "storage_type": os.getenv("SAVED_SEARCH_STORAGE", "memory"),
        "base_dir": os.getenv("SAVED_SEARCH_DIR", "./saved_searches"),
    },
    "retry": {
        "max_retries": int(os.getenv("CATALOG_MAX_RETRIES", "3")),
        "backoff_base_seconds": float(os.getenv("CATALOG_BACKOFF_SECONDS", "0.5")),
    },
}


def get_engine_settings() -> EngineSettings:
    """Get engine settings from configuration."""
    return EngineSettings(
        suggestions=SuggestionConfig(**ENGINE_CONFIG["suggestions"]),
        filters=FilterConfig(**ENGINE_CONFIG["filters"]),
        saved_searches=SavedSearchConfig(**ENGINE_CONFIG["saved_searches"]),
        retry=RetryConfig(**ENGINE_CONFIG["retry"]),
    )
