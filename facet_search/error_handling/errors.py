"""Exception types raised by the faceted search engine."""


class FacetSearchError(Exception):
    """Base class for engine errors."""


class InvalidFilterError(FacetSearchError, ValueError):
    """A filter update carries a malformed value.

    Attributes:
        field: Name of the offending field, when known
    """

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class NotAuthenticatedError(FacetSearchError):
    """A saved search operation was attempted without a signed-in session."""


class CatalogUnavailableError(FacetSearchError):
    """The catalog could not be obtained.

    Index builds recover from this by producing an empty index; it is only
    raised by catalog reloads once every retry has failed.
    """


class SavedSearchStorageError(FacetSearchError):
    """The saved search backend failed to persist a change."""
