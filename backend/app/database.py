import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def normalize_database_url(url: str) -> str:
    # Allow simpler `.env` values like `mysql://...` and upgrade to the driver form.
    url = (url or "").strip()
    return url.replace("mysql://", "mysql+pymysql://", 1) if url.startswith("mysql://") else url


def make_engine(database_url: str) -> Engine:
    db_url = normalize_database_url(database_url)
    if not db_url:
        raise ValueError("DATABASE_URL is required for the SQL storage backend")

    engine_kwargs = {"pool_pre_ping": True}
    if db_url.startswith("sqlite"):
        # Needed for SQLite when used with FastAPI/uvicorn (multiple threads).
        # Also set a busy timeout to reduce "database is locked" errors under concurrent requests.
        engine_kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}

    engine = create_engine(db_url, **engine_kwargs)

    if db_url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, connection_record):  # noqa: ANN001
            try:
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA journal_mode=WAL;")
                cursor.execute("PRAGMA foreign_keys=ON;")
                cursor.execute("PRAGMA busy_timeout=30000;")
                cursor.close()
            except Exception as e:
                logger.warning("Failed to set SQLite pragmas: %s", e)

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_db(engine: Engine) -> None:
    # Import models so they register with SQLAlchemy metadata before create_all.
    from .models import application, company, contact, course, job, password_reset, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
