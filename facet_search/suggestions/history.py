"""Recent query history for a search session."""

from typing import List


class RecentQueries:
    """Bounded, most-recent-first list of submitted queries.

    Re-submitting a known query moves it to the front rather than adding a
    duplicate.

    Attributes:
        limit: Maximum number of queries retained
    """

    def __init__(self, limit: int = 5, queries: List[str] = None):
        self.limit = limit
        self._queries: List[str] = []
        for query in reversed(queries or []):
            self.record(query)

    def record(self, query: str) -> None:
        """Record a submitted query; blank queries are ignored."""
        query = query.strip()
        if not query:
            return
        self._queries = [q for q in self._queries if q != query]
        self._queries.insert(0, query)
        del self._queries[self.limit:]

    def remove(self, query: str) -> None:
        self._queries = [q for q in self._queries if q != query]

    def clear(self) -> None:
        self._queries = []

    def as_list(self) -> List[str]:
        return list(self._queries)

    def __len__(self) -> int:
        return len(self._queries)

    def __iter__(self):
        return iter(list(self._queries))
