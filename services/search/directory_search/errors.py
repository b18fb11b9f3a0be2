class DirectorySearchError(Exception):
    """Base exception for directory search."""


class InvalidPredicate(DirectorySearchError):
    """Raised when a filter value is malformed. Caller error, never retried."""


class InvalidCoordinate(InvalidPredicate):
    """Raised when a latitude/longitude pair is out of range."""


class UnsupportedOrdering(InvalidPredicate):
    """Raised when an unknown ordering key or direction is requested."""


class MissingOrderingContext(DirectorySearchError):
    """Raised when an ordering depends on a predicate that was not supplied."""


class CorpusUnavailable(DirectorySearchError):
    """Raised when the backing store cannot be reached.

    The core never retries; ``retryable`` tells the caller it may.
    """

    retryable = True
