"""
Saved search store.

Keeps a bounded, most-recent-first list of named filter snapshots per user.
Every mutation requires an authenticated session.
"""

import copy
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from facet_search.error_handling.errors import NotAuthenticatedError
from facet_search.models import FilterPreset, SavedSearch, SearchFilters
from facet_search.saved.presets import FILTER_PRESETS
from facet_search.saved.repository import InMemorySavedSearchRepository, SavedSearchRepository


logger = logging.getLogger(__name__)

MAX_SAVED_SEARCHES = 10


@dataclass(frozen=True)
class AuthContext:
    """Authentication state supplied by the host application."""
    is_authenticated: bool = False
    user_id: Optional[str] = None


class SavedSearchStore:
    """CRUD over a user's saved searches.

    The store is storage-agnostic: it reads and replaces the whole list
    through a repository, so a failed write leaves the stored list as it was.

    Attributes:
        auth: Current authentication state
        repository: Storage backend
        max_saved: Number of searches kept; the oldest are evicted
    """

    def __init__(
        self,
        auth: AuthContext,
        repository: Optional[SavedSearchRepository] = None,
        max_saved: int = MAX_SAVED_SEARCHES,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex
    ):
        self.auth = auth
        self.repository = repository or InMemorySavedSearchRepository()
        self.max_saved = max_saved
        self.clock = clock
        self.id_factory = id_factory

    def save(
        self,
        name: str,
        filters: SearchFilters,
        alerts_enabled: bool = False
    ) -> SavedSearch:
        """Save a filter snapshot at the front of the list.

        A blank name falls back to the filters' query, then to
        "Search <date>".

        Args:
            name: Display name
            filters: Filter state to snapshot
            alerts_enabled: Whether new-match alerts start enabled

        Returns:
            The created saved search

        Raises:
            NotAuthenticatedError: Without an authenticated session
            SavedSearchStorageError: If the backend fails
        """
        user_id = self._require_session()
        now = self.clock()
        name = name.strip() or filters.query or f"Search {now.strftime('%m/%d/%Y')}"

        saved = SavedSearch(
            id=self.id_factory(),
            name=name,
            filters=copy.deepcopy(filters),
            alerts_enabled=alerts_enabled,
            created_at=now,
            last_used_at=now,
        )
        searches = [saved] + self.repository.load(user_id)
        evicted = searches[self.max_saved:]
        self.repository.save_all(user_id, searches[:self.max_saved])

        logger.info(f"Saved search '{name}' for user {user_id}")
        if evicted:
            logger.info(f"Evicted {len(evicted)} oldest saved searches for user {user_id}")
        return copy.deepcopy(saved)

    def apply(self, search_id: str) -> SearchFilters:
        """Mark a saved search as used and return a copy of its filters.

        Raises:
            NotAuthenticatedError: Without an authenticated session
            KeyError: If no saved search has that id
        """
        user_id = self._require_session()
        searches = self.repository.load(user_id)

        for position, search in enumerate(searches):
            if search.id == search_id:
                searches[position] = replace(search, last_used_at=self.clock())
                self.repository.save_all(user_id, searches)
                logger.info(f"Applied saved search '{search.name}'")
                return copy.deepcopy(search.filters)

        raise KeyError(search_id)

    def remove(self, search_id: str) -> None:
        """Delete a saved search; unknown ids are ignored."""
        user_id = self._require_session()
        searches = self.repository.load(user_id)
        remaining = [s for s in searches if s.id != search_id]
        if len(remaining) != len(searches):
            self.repository.save_all(user_id, remaining)
            logger.info(f"Removed saved search {search_id}")

    def set_alerts(self, search_id: str, enabled: bool) -> SavedSearch:
        """Enable or disable new-match alerts for a saved search.

        Raises:
            NotAuthenticatedError: Without an authenticated session
            KeyError: If no saved search has that id
        """
        user_id = self._require_session()
        searches = self.repository.load(user_id)

        for position, search in enumerate(searches):
            if search.id == search_id:
                searches[position] = replace(search, alerts_enabled=enabled)
                self.repository.save_all(user_id, searches)
                return copy.deepcopy(searches[position])

        raise KeyError(search_id)

    def list_saved(self) -> List[SavedSearch]:
        """Saved searches for the current user, most recently saved first."""
        user_id = self._require_session()
        return self.repository.load(user_id)

    @staticmethod
    def list_presets() -> Tuple[FilterPreset, ...]:
        return FILTER_PRESETS

    def _require_session(self) -> str:
        if not self.auth.is_authenticated or not self.auth.user_id:
            raise NotAuthenticatedError("Please sign in to manage saved searches")
        return self.auth.user_id
