"""Database engine and sessions for the rightnow task store.

`DATABASE_URL` picks the backend: a local SQLite file unless told otherwise,
or any SQLAlchemy URL (PostgreSQL in hosted deployments).
"""

import logging
import os
from typing import Iterator, Optional
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./rightnow.db")

# Pool knobs only apply to server databases
POOL_SETTINGS = (
    ("pool_size", "DB_POOL_SIZE", 5),
    ("max_overflow", "DB_MAX_OVERFLOW", 5),
    ("pool_timeout", "DB_POOL_TIMEOUT_SEC", 30),
)


def _is_sqlite_url(database_url: str) -> bool:
    if not database_url:
        return False
    return make_url(database_url).get_backend_name() == "sqlite"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}; using {default}")
        return default


def get_engine_kwargs(database_url: str) -> dict:
    """Keyword arguments for `create_engine`, without connecting anywhere."""
    kwargs: dict = {
        "echo": os.getenv("DEBUG", "False").lower() == "true",
        "pool_pre_ping": True,
    }
    if _is_sqlite_url(database_url):
        # Request handlers run in FastAPI's threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        for option, env_name, default in POOL_SETTINGS:
            kwargs[option] = _env_int(env_name, default)
    return kwargs


def _enable_wal(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections are switched to WAL journaling."""
    built = create_engine(database_url, **get_engine_kwargs(database_url))
    if _is_sqlite_url(database_url):
        event.listen(built, "connect", _enable_wal)
    return built


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    """Request-scoped session (FastAPI dependency)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Optional[Engine] = None) -> None:
    """Create missing tables on `bind` (the application engine by default)."""
    from rightnow.database import models  # noqa: F401  (registers TaskDB)

    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info(f"Database ready at {target.url.render_as_string(hide_password=True)}")
