"""
Storage backends for saved searches.

A repository loads and replaces the complete saved search list of one user.
The store never holds partial state across a failed write: it only adopts a
new list once save_all has returned.
"""

import copy
import json
import logging
import os
import re
from pathlib import Path
from typing import Dict, List

from facet_search.error_handling.errors import InvalidFilterError, SavedSearchStorageError
from facet_search.models import SavedSearch
from facet_search.serialization import saved_search_from_dict


logger = logging.getLogger(__name__)


class SavedSearchRepository:
    """Interface for saved search storage."""

    def load(self, user_id: str) -> List[SavedSearch]:
        """Return the user's saved searches, most recent first."""
        raise NotImplementedError

    def save_all(self, user_id: str, searches: List[SavedSearch]) -> None:
        """Replace the user's saved searches.

        Raises:
            SavedSearchStorageError: If the list could not be persisted
        """
        raise NotImplementedError


class InMemorySavedSearchRepository(SavedSearchRepository):
    """Session-scoped storage; contents are lost with the process."""

    def __init__(self):
        self._searches: Dict[str, List[SavedSearch]] = {}

    def load(self, user_id: str) -> List[SavedSearch]:
        return copy.deepcopy(self._searches.get(user_id, []))

    def save_all(self, user_id: str, searches: List[SavedSearch]) -> None:
        self._searches[user_id] = copy.deepcopy(searches)


class JsonFileSavedSearchRepository(SavedSearchRepository):
    """Stores each user's saved searches in a JSON file.

    Unreadable files are logged and treated as empty. Write failures are
    raised as SavedSearchStorageError.

    Attributes:
        base_dir: Directory holding one <user_id>.json file per user
    """

    def __init__(self, base_dir: str = "./saved_searches"):
        self.base_dir = Path(base_dir)

    def _get_file_path(self, user_id: str) -> Path:
        safe_id = re.sub(r'[^A-Za-z0-9_.-]', '_', user_id)
        return self.base_dir / f"{safe_id}.json"

    def load(self, user_id: str) -> List[SavedSearch]:
        path = self._get_file_path(user_id)

        if not path.exists():
            logger.info(f"No saved searches found at {path}")
            return []

        try:
            with open(path, 'r') as f:
                records = json.load(f)
            searches = [saved_search_from_dict(record) for record in records]
            logger.info(f"Loaded {len(searches)} saved searches from {path}")
            return searches
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse saved searches JSON from {path}: {e}")
            return []
        except InvalidFilterError as e:
            logger.warning(f"Discarding malformed saved searches in {path}: {e}")
            return []
        except IOError as e:
            logger.error(f"Failed to read saved searches file {path}: {e}")
            return []

    def save_all(self, user_id: str, searches: List[SavedSearch]) -> None:
        path = self._get_file_path(user_id)
        tmp_path = path.with_suffix('.json.tmp')

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w') as f:
                json.dump([search.to_dict() for search in searches], f, indent=2)
            os.replace(tmp_path, path)
        except (IOError, TypeError) as e:
            if tmp_path.exists():
                tmp_path.unlink()
            logger.error(f"Failed to write saved searches file {path}: {e}")
            raise SavedSearchStorageError(f"Could not persist saved searches: {e}") from e

        logger.debug(f"Saved {len(searches)} searches to {path}")


def create_repository(storage_type: str = "memory", base_dir: str = "./saved_searches") -> SavedSearchRepository:
    """Create a repository for a configured storage type.

    Raises:
        ValueError: If the storage type is not supported
    """
    if storage_type == "memory":
        return InMemorySavedSearchRepository()
    if storage_type == "file":
        return JsonFileSavedSearchRepository(base_dir=base_dir)
    raise ValueError(f"Unsupported storage type: {storage_type}")
