from __future__ import annotations

from typing import Tuple

from .config import Settings
from .geo import Coordinate
from .predicates import PredicateSet
from .ranking import OrderSpec
from .records import PAGE, SERVICE
from .schemas import PageSearchRequest, SearchRequest


def build_service_query(req: SearchRequest, settings: Settings) -> Tuple[PredicateSet, OrderSpec]:
    """Map a service search request onto predicates and an ordering.

    Raises InvalidPredicate / UnsupportedOrdering for malformed values;
    nothing here touches the corpus.
    """
    predicates = PredicateSet().with_kind(SERVICE)

    if req.query is not None:
        predicates = predicates.with_text(req.query)

    if req.category is not None:
        predicates = predicates.with_category(req.category)
    if req.persona is not None:
        predicates = predicates.with_persona(req.persona)

    if req.wait_time is not None:
        predicates = predicates.with_wait_time_max(req.wait_time)

    if req.is_free is not None:
        predicates = predicates.with_is_free(req.is_free)

    if req.location is not None:
        center = Coordinate(req.location.lat, req.location.lon)
        distance = req.distance if req.distance is not None else settings.default_distance_km
        predicates = predicates.with_radius(center, distance)

    if req.eligibilities is not None:
        predicates = predicates.with_eligibilities(req.eligibilities)

    return predicates, OrderSpec.parse(req.order, req.order_direction)


def build_page_query(req: PageSearchRequest) -> Tuple[PredicateSet, OrderSpec]:
    predicates = PredicateSet().with_kind(PAGE).with_text(req.query)
    return predicates, OrderSpec()

