from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from .errors import MissingOrderingContext, UnsupportedOrdering
from .predicates import PredicateSet, TextQuery
from .records import SearchableRecord

RELEVANCE = "relevance"
DISTANCE = "distance"
TITLE = "title"
ORDER_KEYS = (RELEVANCE, DISTANCE, TITLE)

ASC = "asc"
DESC = "desc"

# relevance: strongest match first; everything else smallest first
_DEFAULT_DIRECTION = {RELEVANCE: DESC, DISTANCE: ASC, TITLE: ASC}

# text match tiers
EXACT_TITLE = 3
PARTIAL_TITLE = 2
BODY_ONLY = 1


@dataclass(frozen=True)
class OrderSpec:
    key: str = RELEVANCE
    direction: Optional[str] = None

    def __post_init__(self):
        if self.key not in ORDER_KEYS:
            raise UnsupportedOrdering(f"Unsupported order '{self.key}', expected one of {', '.join(ORDER_KEYS)}")
        direction = self.direction or _DEFAULT_DIRECTION[self.key]
        if direction not in (ASC, DESC):
            raise UnsupportedOrdering(f"Unsupported order direction '{direction}'")
        object.__setattr__(self, "direction", direction)

    @classmethod
    def parse(cls, key: Optional[str] = None, direction: Optional[str] = None) -> "OrderSpec":
        key = (key or RELEVANCE).strip().lower()
        direction = direction.strip().lower() if direction else None
        return cls(key=key, direction=direction)


@dataclass(frozen=True)
class Candidate:
    """A matching record plus the values it is ordered by."""
    record: SearchableRecord
    position: int                     # index in the creation-ordered snapshot
    distance: Optional[float] = None  # km from the radius center, if any
    score: Optional[int] = None       # text match tier, if text is present


def relevance_score(text: TextQuery, record: SearchableRecord) -> int:
    title = record.title.lower()
    if title.strip() == text.raw.lower():
        return EXACT_TITLE
    if any(token in title for token in text.tokens):
        return PARTIAL_TITLE
    return BODY_ONLY


class Ranker:
    """Total order over candidates for one query.

    The primary key comes from the OrderSpec; ties always fall back to the
    ascending record id, so no two distinct records compare equal.
    """

    def __init__(self, primary: Callable[[Candidate], object], reverse: bool, label: str):
        self._primary = primary
        self._reverse = reverse
        self.label = label

    @classmethod
    def for_query(cls, predicates: PredicateSet, order: OrderSpec) -> "Ranker":
        if order.key == DISTANCE:
            if predicates.radius is None:
                raise MissingOrderingContext("Ordering by distance requires a location")
            return cls(lambda c: c.distance, order.direction == DESC, DISTANCE)

        if order.key == TITLE:
            return cls(lambda c: (c.record.title.casefold(), c.record.title), order.direction == DESC, TITLE)

        if predicates.text is None:
            # relevance is undefined without text; keep creation order
            return cls(lambda c: c.position, False, "creation")
        return cls(lambda c: c.score, order.direction == DESC, RELEVANCE)

    def sort(self, candidates: Iterable[Candidate]) -> List[Candidate]:
        # two stable passes: id ascending, then the primary key in either
        # direction; equal primaries keep the id order
        by_id = sorted(candidates, key=lambda c: c.record.id)
        return sorted(by_id, key=self._primary, reverse=self._reverse)

    def compare(self, a: Candidate, b: Candidate) -> int:
        """Comparison function consistent with sort()."""
        pa, pb = self._primary(a), self._primary(b)
        if pa != pb:
            result = -1 if pa < pb else 1
            return -result if self._reverse else result
        ida, idb = a.record.id, b.record.id
        return (ida > idb) - (ida < idb)

    def sort_key(self):
        return functools.cmp_to_key(self.compare)
