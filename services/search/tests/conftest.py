import os

# config is read at import time: keep tests off Postgres and Redis
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CACHE_ENABLED", "0")

from datetime import datetime, timedelta, timezone

import pytest

from directory_search import Coordinate, InMemoryCorpus, SearchableRecord, TaxonomyTree

LONDON = Coordinate(51.5074, -0.1278)
WESTMINSTER = Coordinate(51.5014, -0.1419)
BRIGHTON = Coordinate(50.8225, -0.1372)

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)

TAXONOMY = {
    "cat-health": None,
    "cat-mental-health": "cat-health",
    "cat-counselling": "cat-mental-health",
    "cat-food": None,
    "persona-carers": None,
    "persona-young-carers": "persona-carers",
}


def make_records():
    return [
        SearchableRecord(
            id="r3", title="Food bank", body="Emergency food parcels every weekday.",
            category_ids={"cat-food"}, eligibility_ids={"elig-families"},
            wait_time=0, is_free=True, location=LONDON, created_at=T0,
        ),
        SearchableRecord(
            id="r1", title="Talking therapies", body="Counselling for adults and young carers.",
            category_ids={"cat-counselling"}, persona_ids={"persona-young-carers"},
            eligibility_ids={"elig-adults"}, wait_time=14, is_free=True,
            location=BRIGHTON, created_at=T0 + timedelta(days=1),
        ),
        SearchableRecord(
            id="r2", title="Community kitchen", body="Hot food and a warm space.",
            category_ids={"cat-food"}, eligibility_ids={"elig-adults", "elig-families"},
            wait_time=None, is_free=False, location=WESTMINSTER,
            created_at=T0 + timedelta(days=2),
        ),
        SearchableRecord(
            id="r4", title="Health visitors", body="Home visits for new parents, food advice included.",
            category_ids={"cat-health"}, wait_time=30, is_free=False, location=None,
            created_at=T0 + timedelta(days=3),
        ),
        SearchableRecord(
            id="r5", title="Archived service", body="food", enabled=False,
            created_at=T0 + timedelta(days=4),
        ),
    ]


@pytest.fixture
def records():
    return make_records()


@pytest.fixture
def taxonomy():
    return TaxonomyTree(TAXONOMY)


@pytest.fixture
def corpus(records, taxonomy):
    return InMemoryCorpus(records, taxonomy)


class FakeRedis:
    """Dict-backed stand-in for the few Redis calls the cache makes."""

    def __init__(self):
        self.store = {}
        self.ttls = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl

    def ping(self):
        return True
