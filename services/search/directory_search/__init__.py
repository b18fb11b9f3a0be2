# Directory search core: predicates, ranking, execution and pagination.
# Exports the query-building surface for convenience.

from .config import Settings
from .corpus import InMemoryCorpus, Snapshot
from .errors import (
    CorpusUnavailable,
    DirectorySearchError,
    InvalidCoordinate,
    InvalidPredicate,
    MissingOrderingContext,
    UnsupportedOrdering,
)
from .executor import Executor
from .geo import Coordinate, haversine_km
from .pagination import Paginator, ResultPage
from .predicates import PredicateSet
from .ranking import OrderSpec, Ranker
from .records import SearchableRecord
from .taxonomy import TaxonomyTree

__all__ = [
    "Coordinate",
    "CorpusUnavailable",
    "DirectorySearchError",
    "Executor",
    "InMemoryCorpus",
    "InvalidCoordinate",
    "InvalidPredicate",
    "MissingOrderingContext",
    "OrderSpec",
    "Paginator",
    "PredicateSet",
    "Ranker",
    "ResultPage",
    "SearchableRecord",
    "Settings",
    "Snapshot",
    "TaxonomyTree",
    "UnsupportedOrdering",
    "haversine_km",
]
