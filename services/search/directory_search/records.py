from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

from .geo import Coordinate

SERVICE = "service"
PAGE = "page"
RECORD_KINDS = (SERVICE, PAGE)


@dataclass(frozen=True)
class SearchableRecord:
    """Snapshot of a directory entity (service or information page)."""
    id: str
    title: str
    body: str = ""
    kind: str = SERVICE
    category_ids: FrozenSet[str] = field(default_factory=frozenset)
    persona_ids: FrozenSet[str] = field(default_factory=frozenset)
    eligibility_ids: FrozenSet[str] = field(default_factory=frozenset)
    wait_time: Optional[float] = None  # days
    is_free: bool = False
    location: Optional[Coordinate] = None
    enabled: bool = True
    created_at: Optional[datetime] = None

    def __post_init__(self):
        # accept any iterable for the id sets; store frozensets of str
        for name in ("category_ids", "persona_ids", "eligibility_ids"):
            value = getattr(self, name)
            object.__setattr__(self, name, frozenset(str(v) for v in value))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "title": self.title,
            "body": self.body,
            "category_ids": sorted(self.category_ids),
            "persona_ids": sorted(self.persona_ids),
            "eligibility_ids": sorted(self.eligibility_ids),
            "wait_time": self.wait_time,
            "is_free": self.is_free,
            "lat": self.location.lat if self.location else None,
            "lon": self.location.lon if self.location else None,
        }
