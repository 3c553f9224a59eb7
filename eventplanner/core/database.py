import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

from fastapi import Request
from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass, Session, sessionmaker

logger = logging.getLogger(__name__)


class Base(MappedAsDataclass, DeclarativeBase):
    pass


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores ON DELETE CASCADE unless the pragma is set per connection."""

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _ensure_sqlite_directory(url: str) -> None:
    database = make_url(url).database
    if not database or database == ":memory:":
        return
    Path(database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


class Database:
    """Owns the engine and connection pool for one process.

    Built once at startup, stored on ``app.state.db`` and disposed at shutdown.
    """

    def __init__(self, url: str) -> None:
        self.url = make_url(url)
        engine_kwargs: dict[str, Any] = {"pool_pre_ping": True}
        connect_args: dict[str, Any] = {}

        if self.is_sqlite:
            # Relax SQLite's default thread check so the same connection can be reused across requests.
            connect_args["check_same_thread"] = False
            _ensure_sqlite_directory(url)
        else:
            engine_kwargs.update(
                {
                    "pool_size": 5,
                    "max_overflow": 10,
                    "pool_recycle": 1800,
                    "pool_timeout": 30,
                }
            )
            connect_args["connect_timeout"] = 5

        if connect_args:
            engine_kwargs["connect_args"] = connect_args

        self.engine = create_engine(url, **engine_kwargs)
        if self.is_sqlite:
            enable_sqlite_foreign_keys(self.engine)

        self.session_factory = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.drivername.startswith("sqlite")

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        # Registers every mapped table on Base.metadata.
        import eventplanner.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("Database ping failed for %s", self.url.render_as_string())
            return False

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "db", None)
    if database is None:
        raise RuntimeError("Database is not configured on application state")
    return database


def get_db(request: Request) -> Generator[Session]:
    session = get_database(request).session()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
