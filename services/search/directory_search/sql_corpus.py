from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError, TimeoutError as PoolTimeoutError

from .config import Settings
from .corpus import Snapshot
from .errors import CorpusUnavailable
from .geo import latitude_band
from .models import CATEGORY, ELIGIBILITY, PERSONA, DirectoryRecord, RecordTaxonomy, Taxonomy
from .predicates import PredicateSet
from .taxonomy import TaxonomyTree

logger = logging.getLogger(__name__)


class SqlCorpus:
    """Corpus backed by the directory tables.

    Taxonomy and records are read inside one transaction. Predicates SQL can
    evaluate exactly are pushed into the WHERE clause; radius becomes a
    latitude band and text is left to the executor, so the rows returned are
    always a superset of the true matches.
    """

    def __init__(self, session_factory, settings: Optional[Settings] = None):
        self.session_factory = session_factory
        self.settings = settings or Settings()

    def snapshot(self, predicates: PredicateSet) -> Snapshot:
        try:
            with self.session_factory() as session, session.begin():
                pairs = session.execute(select(Taxonomy.id, Taxonomy.parent_id)).all()
                taxonomy = TaxonomyTree.from_pairs(pairs)
                rows = session.scalars(self.statement(predicates, taxonomy)).all()
                records = tuple(row.to_record() for row in rows)
        except (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError) as e:
            logger.error("directory store unavailable: %s", e)
            raise CorpusUnavailable("Directory store is unavailable, try again later") from e

        logger.debug("sql snapshot: %d candidate rows", len(records))
        return Snapshot(records=records, taxonomy=taxonomy)

    def statement(self, predicates: PredicateSet, taxonomy: TaxonomyTree):
        rec = DirectoryRecord
        stmt = select(rec).where(rec.enabled.is_(True))

        if predicates.kind is not None:
            stmt = stmt.where(rec.kind == predicates.kind)

        if predicates.is_free is not None:
            stmt = stmt.where(rec.is_free == predicates.is_free)

        if predicates.wait_time_max is not None:
            cond = rec.wait_time_days <= predicates.wait_time_max
            if self.settings.null_wait_time_matches:
                cond = or_(cond, rec.wait_time_days.is_(None))
            stmt = stmt.where(cond)

        for role, node in ((CATEGORY, predicates.category), (PERSONA, predicates.persona)):
            if node is not None:
                ids = sorted(taxonomy.expand(node))
                stmt = stmt.where(rec.taxonomy_links.any(
                    and_(RecordTaxonomy.role == role, RecordTaxonomy.taxonomy_id.in_(ids))
                ))

        if predicates.eligibilities is not None:
            stmt = stmt.where(rec.taxonomy_links.any(
                and_(RecordTaxonomy.role == ELIGIBILITY,
                     RecordTaxonomy.taxonomy_id.in_(sorted(predicates.eligibilities)))
            ))

        if predicates.radius is not None:
            lo, hi = latitude_band(predicates.radius.center, predicates.radius.distance_km)
            stmt = stmt.where(rec.lat.is_not(None), rec.lon.is_not(None), rec.lat.between(lo, hi))

        # insertion order; the executor's fallback ordering relies on it
        return stmt.order_by(rec.seq.asc())
