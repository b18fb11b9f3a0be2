from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .config import Settings
from .ranking import Candidate


@dataclass(frozen=True)
class ResultPage:
    candidates: Tuple[Candidate, ...]
    total: int
    page: int
    per_page: int

    @property
    def records(self):
        return tuple(c.record for c in self.candidates)

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    def to_dict(self) -> dict:
        data = []
        for c in self.candidates:
            item = c.record.to_dict()
            if c.distance is not None:
                item["distance_km"] = c.distance
            if c.score is not None:
                item["score"] = c.score
            data.append(item)
        return {
            "data": data,
            "meta": {
                "total": self.total,
                "page": self.page,
                "per_page": self.per_page,
                "last_page": self.last_page,
            },
        }


class Paginator:
    """Slices an ordered candidate list into one bounded page.

    Out-of-range input is clamped, never rejected.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()

    def clamp(self, page: Optional[int], per_page: Optional[int]) -> Tuple[int, int]:
        page = page if page is not None and page >= 1 else 1
        if per_page is None or per_page <= 0:
            per_page = self.settings.default_per_page
        return int(page), int(min(per_page, self.settings.max_per_page))

    def paginate(self, ordered: Sequence[Candidate], page: Optional[int] = None,
                 per_page: Optional[int] = None) -> ResultPage:
        page, per_page = self.clamp(page, per_page)
        start = (page - 1) * per_page
        return ResultPage(
            candidates=tuple(ordered[start:start + per_page]),
            total=len(ordered),
            page=page,
            per_page=per_page,
        )
