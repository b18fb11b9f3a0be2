from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Protocol, Tuple

from .predicates import PredicateSet
from .records import SearchableRecord
from .taxonomy import TaxonomyTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Records and taxonomy as seen by one query resolution.

    Records are in creation order and may be a superset of the matches; the
    executor re-applies every predicate.
    """
    records: Tuple[SearchableRecord, ...]
    taxonomy: TaxonomyTree = field(default_factory=TaxonomyTree)


class Corpus(Protocol):
    def snapshot(self, predicates: PredicateSet) -> Snapshot:
        ...


class InMemoryCorpus:
    """Process-local corpus.

    Writers and readers share one lock; a snapshot is an immutable tuple, so
    a query never observes a write that lands while it is being resolved.
    """

    def __init__(self, records: Iterable[SearchableRecord] = (),
                 taxonomy: Optional[TaxonomyTree] = None):
        self._lock = threading.Lock()
        self._records: Dict[str, SearchableRecord] = {}
        self._taxonomy = taxonomy or TaxonomyTree()
        for record in records:
            self._records[record.id] = record

    def add(self, record: SearchableRecord) -> None:
        with self._lock:
            # replacing keeps the original creation slot
            self._records[record.id] = record

    def remove(self, record_id: str) -> Optional[SearchableRecord]:
        with self._lock:
            return self._records.pop(record_id, None)

    def set_taxonomy(self, taxonomy: TaxonomyTree) -> None:
        with self._lock:
            self._taxonomy = taxonomy

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def snapshot(self, predicates: PredicateSet) -> Snapshot:
        with self._lock:
            records = tuple(r for r in self._records.values() if r.enabled)
            taxonomy = self._taxonomy
        logger.debug("in-memory snapshot: %d records", len(records))
        return Snapshot(records=records, taxonomy=taxonomy)
