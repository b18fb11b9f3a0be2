import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .geo import Coordinate
from .records import SERVICE, SearchableRecord

CATEGORY = "category"
PERSONA = "persona"
ELIGIBILITY = "eligibility"


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class Taxonomy(Base):
    __tablename__ = "taxonomies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("taxonomies.id"), nullable=True)


class RecordTaxonomy(Base):
    __tablename__ = "record_taxonomies"

    record_id: Mapped[str] = mapped_column(String(36), ForeignKey("directory_records.id"), primary_key=True)
    taxonomy_id: Mapped[str] = mapped_column(String(36), ForeignKey("taxonomies.id"), primary_key=True)
    role: Mapped[str] = mapped_column(String(16), primary_key=True)  # category | persona | eligibility


class DirectoryRecord(Base):
    __tablename__ = "directory_records"

    # autoincrement key; defines creation order, created_at can tie within a batch
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=_uuid)
    kind: Mapped[str] = mapped_column(String(16), nullable=False, default=SERVICE)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    wait_time_days: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lon: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    taxonomy_links: Mapped[List[RecordTaxonomy]] = relationship(lazy="selectin", cascade="all, delete-orphan")

    def tag(self, taxonomy_id: str, role: str) -> None:
        self.taxonomy_links.append(RecordTaxonomy(taxonomy_id=taxonomy_id, role=role))

    def to_record(self) -> SearchableRecord:
        ids = {CATEGORY: set(), PERSONA: set(), ELIGIBILITY: set()}
        for link in self.taxonomy_links:
            ids.setdefault(link.role, set()).add(link.taxonomy_id)
        location = None
        if self.lat is not None and self.lon is not None:
            location = Coordinate(self.lat, self.lon)
        return SearchableRecord(
            id=self.id,
            kind=self.kind,
            title=self.title,
            body=self.body or "",
            category_ids=ids[CATEGORY],
            persona_ids=ids[PERSONA],
            eligibility_ids=ids[ELIGIBILITY],
            wait_time=self.wait_time_days,
            is_free=bool(self.is_free),
            location=location,
            enabled=bool(self.enabled),
            created_at=self.created_at,
        )
