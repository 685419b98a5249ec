import logging
from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from docshare.core import config


Base = declarative_base()

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False) -> Engine:
    if url.startswith('sqlite'):
        kwargs = {'connect_args': {'check_same_thread': False}}
        # In-memory SQLite lives inside a single connection.
        if url in ('sqlite://', 'sqlite:///:memory:'):
            kwargs['poolclass'] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


class Database:
    """Store handle owning the engine and the session factory.

    Constructed once when the application starts and disposed on shutdown;
    request handlers receive sessions from it through ``get_db``.
    """

    def __init__(self, url: str | None = None, echo: bool | None = None):
        self.url = url or config.DATABASE_URL
        self.engine = build_engine(self.url, echo=config.SQL_ECHO if echo is None else echo)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )

    def create_schema(self) -> None:
        # Import models so they register with Base.metadata.
        from docshare.models import document, download, user  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def close(self) -> None:
        logger.info('Disposing database engine for %s', self.engine.url.render_as_string(hide_password=True))
        self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
