from pydantic import BaseModel, Field, model_validator
from typing import List, Literal, Optional

from .config import SEARCH_MAX_DISTANCE_KM


class Location(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class SearchRequest(BaseModel):
    # text length and distance > 0 are checked by the predicate builders so
    # their messages reach the caller unchanged
    query: Optional[str] = Field(default=None, max_length=255)
    category: Optional[str] = None
    persona: Optional[str] = None
    wait_time: Optional[float] = None  # max days
    is_free: Optional[bool] = None
    location: Optional[Location] = None
    distance: Optional[float] = Field(default=None, le=SEARCH_MAX_DISTANCE_KM)  # km
    eligibilities: Optional[List[str]] = None
    order: str = "relevance"
    order_direction: Optional[Literal["asc", "desc"]] = None
    page: Optional[int] = None
    per_page: Optional[int] = None

    @model_validator(mode="after")
    def one_taxonomy_filter(self):
        if self.category is not None and self.persona is not None:
            raise ValueError("Filter by category or persona, not both")
        return self


class PageSearchRequest(BaseModel):
    query: str = Field(max_length=255)
    page: Optional[int] = None
    per_page: Optional[int] = None


class RecordHit(BaseModel):
    id: str
    kind: str
    title: str
    body: str
    category_ids: List[str]
    persona_ids: List[str]
    eligibility_ids: List[str]
    wait_time: Optional[float]
    is_free: bool
    lat: Optional[float]
    lon: Optional[float]
    distance_km: Optional[float] = None
    score: Optional[int] = None


class SearchMeta(BaseModel):
    total: int
    page: int
    per_page: int
    last_page: int


class SearchResponse(BaseModel):
    data: List[RecordHit]
    meta: SearchMeta
