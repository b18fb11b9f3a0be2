from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from directory_search import (
    CorpusUnavailable,
    Executor,
    InMemoryCorpus,
    OrderSpec,
    PredicateSet,
    Settings,
)
from directory_search import seed
from directory_search.models import CATEGORY, ELIGIBILITY, PERSONA, Base, DirectoryRecord, Taxonomy
from directory_search.sql_corpus import SqlCorpus

from conftest import T0, TAXONOMY, WESTMINSTER, make_records


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


def load(session_factory, records, taxonomy):
    with session_factory() as db:
        for node, parent in taxonomy.items():
            db.add(Taxonomy(id=node, name=node, parent_id=parent))
        db.flush()
        for r in records:
            row = DirectoryRecord(
                id=r.id, kind=r.kind, title=r.title, body=r.body,
                wait_time_days=r.wait_time, is_free=r.is_free,
                lat=r.location.lat if r.location else None,
                lon=r.location.lon if r.location else None,
                enabled=r.enabled, created_at=r.created_at,
            )
            for role, ids in ((CATEGORY, r.category_ids), (PERSONA, r.persona_ids), (ELIGIBILITY, r.eligibility_ids)):
                for taxonomy_id in sorted(ids):
                    row.tag(taxonomy_id, role)
            db.add(row)
        db.commit()


@pytest.fixture
def sql_corpus(session_factory):
    # eligibility ids are not taxonomy rows in the fixtures; sqlite does not
    # enforce foreign keys by default
    load(session_factory, make_records(), TAXONOMY)
    return SqlCorpus(session_factory)


def ids(result):
    return [r.id for r in result.records]


QUERIES = [
    PredicateSet(),
    PredicateSet().with_text("food"),
    PredicateSet().with_category("cat-health"),
    PredicateSet().with_persona("persona-carers"),
    PredicateSet().with_wait_time_max(14),
    PredicateSet().with_is_free(False),
    PredicateSet().with_radius(WESTMINSTER, 5),
    PredicateSet().with_eligibilities({"elig-adults", "elig-nobody"}),
    PredicateSet().with_kind("service").with_text("food").with_is_free(True),
]


@pytest.mark.parametrize("predicates", QUERIES)
def test_sql_and_in_memory_agree(sql_corpus, corpus, predicates):
    expected = Executor(corpus).resolve(predicates)
    actual = Executor(sql_corpus).resolve(predicates)
    assert ids(actual) == ids(expected)
    assert actual.total == expected.total


@pytest.mark.parametrize("null_matches", [False, True])
def test_null_wait_time_pushdown_follows_settings(session_factory, null_matches):
    load(session_factory, make_records(), TAXONOMY)
    settings = Settings(null_wait_time_matches=null_matches)
    result = Executor(SqlCorpus(session_factory, settings), settings).resolve(PredicateSet().with_wait_time_max(14))
    assert ("r2" in ids(result)) is null_matches


def test_snapshot_is_creation_ordered_and_prefiltered(sql_corpus):
    snap = sql_corpus.snapshot(PredicateSet().with_radius(WESTMINSTER, 5))
    # latitude band drops Brighton; r4 has no location
    assert [r.id for r in snap.records] == ["r3", "r2"]
    assert snap.taxonomy.expand("cat-health") == {"cat-health", "cat-mental-health", "cat-counselling"}


def test_text_is_not_pushed_down(sql_corpus):
    snap = sql_corpus.snapshot(PredicateSet().with_text("zzz-not-there"))
    assert len(snap.records) == 4


def test_distance_ordering(sql_corpus):
    result = Executor(sql_corpus).resolve(PredicateSet().with_radius(WESTMINSTER, 100), OrderSpec("distance"))
    assert ids(result) == ["r2", "r3", "r1"]


def test_rows_map_to_records(sql_corpus):
    snap = sql_corpus.snapshot(PredicateSet().with_category("cat-counselling"))
    (record,) = snap.records
    assert record.id == "r1"
    assert record.persona_ids == {"persona-young-carers"}
    assert record.eligibility_ids == {"elig-adults"}
    assert record.location.lat == pytest.approx(50.8225)


def test_single_batch_keeps_insertion_order(session_factory):
    # every row shares one created_at, and ids sort opposite to insertion
    with session_factory() as db:
        for rid in ("c-third", "b-second", "a-first"):
            db.add(DirectoryRecord(id=rid, title=rid, created_at=T0))
        db.commit()

    result = Executor(SqlCorpus(session_factory)).resolve(PredicateSet())
    assert ids(result) == ["c-third", "b-second", "a-first"]


def test_seeded_records_list_in_insertion_order(session_factory):
    seed.run(session_factory)
    result = Executor(SqlCorpus(session_factory)).resolve(PredicateSet())
    assert ids(result) == ["svc-counselling", "svc-food-bank", "page-food-guide"]


def test_unreachable_store_raises_corpus_unavailable():
    engine = create_engine("sqlite:////nonexistent-dir/directory.db")
    corpus = SqlCorpus(sessionmaker(bind=engine))
    with pytest.raises(CorpusUnavailable) as exc:
        Executor(corpus).resolve(PredicateSet())
    assert exc.value.retryable
    assert exc.value.__cause__ is not None


class TestSeed:

    def test_seeds_empty_directory_once(self, session_factory):
        assert seed.run(session_factory) == 3
        assert seed.run(session_factory) == 0

    def test_seeded_data_is_searchable(self, session_factory):
        seed.run(session_factory)
        executor = Executor(SqlCorpus(session_factory))

        services = executor.resolve(PredicateSet().with_kind("service").with_category("cat-health"))
        assert ids(services) == ["svc-counselling"]

        pages = executor.resolve(PredicateSet().with_kind("page").with_text("food"))
        assert ids(pages) == ["page-food-guide"]

        nearby = executor.resolve(PredicateSet().with_radius(WESTMINSTER, 5), OrderSpec("distance"))
        assert ids(nearby) == ["svc-food-bank", "svc-counselling"]


def test_pool_timeout_raises_corpus_unavailable():
    def exhausted_pool():
        raise PoolTimeoutError("QueuePool limit of size 5 overflow 10 reached")

    with pytest.raises(CorpusUnavailable) as exc:
        Executor(SqlCorpus(exhausted_pool)).resolve(PredicateSet())
    assert isinstance(exc.value.__cause__, PoolTimeoutError)


def test_in_memory_fixture_sanity(corpus):
    assert isinstance(corpus, InMemoryCorpus)
    assert len(corpus) == 5
