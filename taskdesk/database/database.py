"""Engine and session wiring for the task store.

``DATABASE_URL`` picks the backend. Without it tasks live in a local SQLite
file; any other SQLAlchemy URL gets a bounded connection pool sized from
the ``DB_*`` environment variables.
"""

import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskdesk.db")

# create_engine() option -> (environment variable, default)
POOL_SETTINGS = {
    "pool_size": ("DB_POOL_SIZE", 5),
    "max_overflow": ("DB_MAX_OVERFLOW", 5),
    "pool_timeout": ("DB_POOL_TIMEOUT_SEC", 30),
}


def _is_sqlite_url(database_url: str) -> bool:
    return make_url(database_url).get_backend_name() == "sqlite"


def get_engine_kwargs(database_url: str) -> dict:
    """Options passed to create_engine() for ``database_url``.

    Reads the environment on every call and never connects.
    """
    engine_kwargs: dict = {
        "echo": os.getenv("DEBUG", "False").lower() == "true",
        "pool_pre_ping": True,
    }

    if _is_sqlite_url(database_url):
        # FastAPI runs sync endpoints on worker threads
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        return engine_kwargs

    for option, (env_name, default) in POOL_SETTINGS.items():
        engine_kwargs[option] = int(os.getenv(env_name, str(default)))
    return engine_kwargs


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, **get_engine_kwargs(database_url))


engine = build_engine(DATABASE_URL)


@event.listens_for(engine, "connect")
def set_sqlite_pragmas(dbapi_conn, connection_record):
    """Turn on foreign keys and WAL journaling for each new SQLite connection."""
    if engine.url.get_backend_name() != "sqlite":
        return
    cursor = dbapi_conn.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
    finally:
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Session:
    """Yield one session per request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create the task tables if they are missing."""
    # TaskDB must be imported so its table is registered on Base.metadata
    from taskdesk.database import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
