from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .errors import InvalidPredicate
from .geo import Coordinate
from .records import RECORD_KINDS

MIN_TEXT_LENGTH = 3

_WORD = re.compile(r"\w+", re.UNICODE)


def tokenize(raw: str) -> Tuple[str, ...]:
    """Lowercase word tokens, de-duplicated, in first-seen order."""
    seen: List[str] = []
    for token in _WORD.findall(raw.lower()):
        if token not in seen:
            seen.append(token)
    return tuple(seen)


@dataclass(frozen=True)
class TextQuery:
    raw: str
    tokens: Tuple[str, ...]


@dataclass(frozen=True)
class Radius:
    center: Coordinate
    distance_km: float


@dataclass(frozen=True)
class PredicateSet:
    """Immutable set of filter predicates; every present predicate must hold.

    Builder methods return a new PredicateSet and never touch the receiver,
    so a base set can be shared and extended by concurrent queries. Setting
    the same kind twice keeps the last value.
    """
    text: Optional[TextQuery] = None
    category: Optional[str] = None
    persona: Optional[str] = None
    wait_time_max: Optional[float] = None
    is_free: Optional[bool] = None
    radius: Optional[Radius] = None
    eligibilities: Optional[FrozenSet[str]] = None
    kind: Optional[str] = None

    def with_text(self, text: str) -> "PredicateSet":
        if not isinstance(text, str):
            raise InvalidPredicate("text must be a string")
        stripped = text.strip()
        if len(stripped) < MIN_TEXT_LENGTH:
            raise InvalidPredicate(f"text must be at least {MIN_TEXT_LENGTH} characters")
        tokens = tokenize(stripped)
        if not tokens:
            raise InvalidPredicate("text must contain at least one word")
        return replace(self, text=TextQuery(raw=stripped, tokens=tokens))

    def with_category(self, category_id: str) -> "PredicateSet":
        return replace(self, category=_taxonomy_id(category_id, "category"))

    def with_persona(self, persona_id: str) -> "PredicateSet":
        return replace(self, persona=_taxonomy_id(persona_id, "persona"))

    def with_wait_time_max(self, days: float) -> "PredicateSet":
        value = _finite_number(days, "wait time")
        if value < 0:
            raise InvalidPredicate("wait time must not be negative")
        return replace(self, wait_time_max=value)

    def with_is_free(self, is_free: bool) -> "PredicateSet":
        if not isinstance(is_free, bool):
            raise InvalidPredicate("is_free must be a boolean")
        return replace(self, is_free=is_free)

    def with_radius(self, center: Coordinate, distance_km: float) -> "PredicateSet":
        if not isinstance(center, Coordinate):
            raise InvalidPredicate("radius center must be a Coordinate")
        value = _finite_number(distance_km, "distance")
        if value <= 0:
            raise InvalidPredicate("distance must be greater than 0")
        return replace(self, radius=Radius(center=center, distance_km=value))

    def with_eligibilities(self, eligibility_ids: Iterable[str]) -> "PredicateSet":
        if isinstance(eligibility_ids, str):
            raise InvalidPredicate("eligibilities must be a collection of ids")
        ids = frozenset(_taxonomy_id(i, "eligibility") for i in eligibility_ids)
        if not ids:
            raise InvalidPredicate("eligibilities must not be empty")
        return replace(self, eligibilities=ids)

    def with_kind(self, kind: str) -> "PredicateSet":
        if kind not in RECORD_KINDS:
            raise InvalidPredicate(f"kind must be one of {', '.join(RECORD_KINDS)}")
        return replace(self, kind=kind)

    def kinds(self) -> Tuple[str, ...]:
        """Names of the predicates present, for logging."""
        return tuple(name for name in _PREDICATE_NAMES if getattr(self, name) is not None)


_PREDICATE_NAMES = (
    "text", "category", "persona", "wait_time_max", "is_free", "radius", "eligibilities", "kind",
)


def _taxonomy_id(value, label: str) -> str:
    if value is None or isinstance(value, bool):
        raise InvalidPredicate(f"{label} id is required")
    value = str(value).strip()
    if not value:
        raise InvalidPredicate(f"{label} id must not be blank")
    return value


def _finite_number(value, label: str) -> float:
    if isinstance(value, bool):
        raise InvalidPredicate(f"{label} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidPredicate(f"{label} must be a number")
    if not math.isfinite(number):
        raise InvalidPredicate(f"{label} must be finite")
    return number
