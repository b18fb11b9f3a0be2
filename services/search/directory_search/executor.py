from __future__ import annotations

import logging
from typing import List, Optional

from .config import Settings
from .corpus import Corpus, Snapshot
from .geo import haversine_km
from .pagination import Paginator, ResultPage
from .predicates import PredicateSet
from .ranking import Candidate, OrderSpec, Ranker, relevance_score
from .records import SearchableRecord
from .taxonomy import TaxonomyTree

logger = logging.getLogger(__name__)


def matches(predicates: PredicateSet, record: SearchableRecord, taxonomy: TaxonomyTree,
            null_wait_time_matches: bool = False) -> bool:
    """True when the record satisfies every predicate present in the set."""
    if not record.enabled:
        return False

    if predicates.kind is not None and record.kind != predicates.kind:
        return False

    if predicates.is_free is not None and record.is_free != predicates.is_free:
        return False

    if predicates.wait_time_max is not None:
        if record.wait_time is None:
            if not null_wait_time_matches:
                return False
        elif record.wait_time > predicates.wait_time_max:
            return False

    if predicates.category is not None and not taxonomy.contains(predicates.category, record.category_ids):
        return False

    if predicates.persona is not None and not taxonomy.contains(predicates.persona, record.persona_ids):
        return False

    if predicates.eligibilities is not None and not (predicates.eligibilities & record.eligibility_ids):
        return False

    if predicates.text is not None:
        title = record.title.lower()
        body = record.body.lower()
        for token in predicates.text.tokens:
            if token not in title and token not in body:
                return False

    if predicates.radius is not None:
        if record.location is None:
            return False
        if haversine_km(predicates.radius.center, record.location) > predicates.radius.distance_km:
            return False

    return True


class Executor:
    """Resolves one query against a corpus.

    The corpus is read once per resolution; the total and the returned page
    both come from that single filtering pass.
    """

    def __init__(self, corpus: Corpus, settings: Optional[Settings] = None):
        self.corpus = corpus
        self.settings = settings or Settings()
        self.paginator = Paginator(self.settings)

    def candidates(self, predicates: PredicateSet, order: Optional[OrderSpec] = None) -> List[Candidate]:
        """Full filtered and ordered candidate list."""
        order = order or OrderSpec()
        # raises MissingOrderingContext before any corpus access
        ranker = Ranker.for_query(predicates, order)
        snapshot = self.corpus.snapshot(predicates)
        return ranker.sort(self._filter(predicates, snapshot))

    def resolve(self, predicates: PredicateSet, order: Optional[OrderSpec] = None,
                page: Optional[int] = None, per_page: Optional[int] = None) -> ResultPage:
        ordered = self.candidates(predicates, order)
        result = self.paginator.paginate(ordered, page, per_page)
        logger.debug(
            "search resolved predicates=%s order=%s total=%d page=%d per_page=%d",
            ",".join(predicates.kinds()) or "-", (order or OrderSpec()).key,
            result.total, result.page, result.per_page,
        )
        return result

    def _filter(self, predicates: PredicateSet, snapshot: Snapshot) -> List[Candidate]:
        found = []
        for position, record in enumerate(snapshot.records):
            if not matches(predicates, record, snapshot.taxonomy, self.settings.null_wait_time_matches):
                continue
            distance = None
            if predicates.radius is not None:
                distance = haversine_km(predicates.radius.center, record.location)
            score = None
            if predicates.text is not None:
                score = relevance_score(predicates.text, record)
            found.append(Candidate(record=record, position=position, distance=distance, score=score))
        return found
