from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from .config import DATABASE_URL, DB_ISOLATION_LEVEL


def make_engine(url: str = DATABASE_URL):
    kwargs = {"pool_pre_ping": True}
    # sqlite has no REPEATABLE READ; it serializes transactions anyway
    if not url.startswith("sqlite"):
        kwargs["isolation_level"] = DB_ISOLATION_LEVEL
    return create_engine(url, **kwargs)


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
