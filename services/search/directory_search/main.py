import logging

from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .cache import ResultCache, make_cache
from .config import LOG_LEVEL, Settings
from .db import SessionLocal, get_db
from .errors import CorpusUnavailable, InvalidPredicate, MissingOrderingContext
from .executor import Executor
from .query import build_page_query, build_service_query
from .schemas import PageSearchRequest, SearchRequest, SearchResponse
from .sql_corpus import SqlCorpus

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Search Service", version="0.2.0")

settings = Settings.from_env()
cache = make_cache()
corpus = SqlCorpus(SessionLocal, settings)


def get_settings() -> Settings:
    return settings


def get_cache() -> ResultCache:
    return cache


def get_executor() -> Executor:
    return Executor(corpus, settings)


@app.exception_handler(InvalidPredicate)
def invalid_predicate(request: Request, exc: InvalidPredicate):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(MissingOrderingContext)
def missing_ordering_context(request: Request, exc: MissingOrderingContext):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(CorpusUnavailable)
def corpus_unavailable(request: Request, exc: CorpusUnavailable):
    return JSONResponse(
        status_code=503,
        content={"detail": str(exc), "retryable": exc.retryable},
        headers={"Retry-After": "5"},
    )


@app.get("/health")
def health(cache: ResultCache = Depends(get_cache)):
    if not cache.ping():
        return {"status": "degraded"}  # still OK; search can work without cache
    return {"status": "ok"}


@app.get("/ready")
def ready(db: Session = Depends(get_db), cache: ResultCache = Depends(get_cache)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("readiness check failed: %s", e)
        return {"ready": False}
    return {"ready": True, "cache": cache.ping()}


@app.post("/search", response_model=SearchResponse)
def search_services(
    payload: SearchRequest,
    executor: Executor = Depends(get_executor),
    cache: ResultCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
):
    # build first: malformed filters fail before cache or corpus access
    predicates, order = build_service_query(payload, settings)

    cache_key = cache.key("services", payload.model_dump(mode="json"))
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    resp = executor.resolve(predicates, order, payload.page, payload.per_page).to_dict()
    cache.set(cache_key, resp)
    return resp


@app.post("/search/pages", response_model=SearchResponse)
def search_pages(
    payload: PageSearchRequest,
    executor: Executor = Depends(get_executor),
    cache: ResultCache = Depends(get_cache),
):
    predicates, order = build_page_query(payload)

    cache_key = cache.key("pages", payload.model_dump(mode="json"))
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    resp = executor.resolve(predicates, order, payload.page, payload.per_page).to_dict()
    cache.set(cache_key, resp)
    return resp
