import os
from dataclasses import dataclass


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# DB (same Postgres as other services)
DB_USER = os.getenv("DB_USER", "kormo")
DB_PASS = os.getenv("DB_PASS", "kormo")
DB_NAME = os.getenv("DB_NAME", "kormo")
DB_HOST = os.getenv("DB_HOST", "postgres")
DB_PORT = os.getenv("DB_PORT", "5432")
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
# count and page must come from the same database state
DB_ISOLATION_LEVEL = os.getenv("DB_ISOLATION_LEVEL", "REPEATABLE READ")

# Redis response cache
REDIS_HOST = os.getenv("REDIS_HOST", "redis")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", "60"))
CACHE_ENABLED = _env_bool("CACHE_ENABLED", "1")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Search tunables
SEARCH_PER_PAGE = int(os.getenv("SEARCH_PER_PAGE", "25"))
SEARCH_MAX_PER_PAGE = int(os.getenv("SEARCH_MAX_PER_PAGE", "100"))
SEARCH_DISTANCE_KM = float(os.getenv("SEARCH_DISTANCE_KM", "5"))
SEARCH_MAX_DISTANCE_KM = float(os.getenv("SEARCH_MAX_DISTANCE_KM", "50"))  # request cap
SEARCH_NULL_WAIT_TIME_MATCHES = _env_bool("SEARCH_NULL_WAIT_TIME_MATCHES", "0")


@dataclass(frozen=True)
class Settings:
    """Search tunables injected into the executor and paginator."""
    default_per_page: int = 25
    max_per_page: int = 100
    default_distance_km: float = 5.0
    null_wait_time_matches: bool = False

    def __post_init__(self):
        if self.max_per_page < 1:
            raise ValueError("max_per_page must be at least 1")
        if not 1 <= self.default_per_page <= self.max_per_page:
            raise ValueError("default_per_page must be between 1 and max_per_page")
        if self.default_distance_km <= 0:
            raise ValueError("default_distance_km must be greater than 0")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            default_per_page=SEARCH_PER_PAGE,
            max_per_page=SEARCH_MAX_PER_PAGE,
            default_distance_km=SEARCH_DISTANCE_KM,
            null_wait_time_matches=SEARCH_NULL_WAIT_TIME_MATCHES,
        )
