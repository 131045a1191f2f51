import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import EditorConfig
from .errors import SchemaAccessError

logger = logging.getLogger(__name__)


class Database:
    """
    Process-wide handle on one SQLAlchemy engine.

    Created once at startup and disposed at shutdown; every operation
    borrows a pooled connection for its own duration only.
    """

    def __init__(self, engine: Engine):
        self._engine: Optional[Engine] = engine

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> 'Database':
        try:
            engine = create_engine(url, pool_pre_ping=True, echo=echo)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create database engine: {e}")
            raise SchemaAccessError(f"Could not open database: {e}")
        logger.info(f"Opened database: {engine.url.render_as_string(hide_password=True)}")
        return cls(engine)

    @classmethod
    def from_config(cls, config: EditorConfig) -> 'Database':
        return cls.from_url(config.database_url, echo=config.echo_sql)

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise SchemaAccessError("Database handle has been disposed")
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def quote(self, identifier: str) -> str:
        """Quote an identifier only where the dialect requires it."""
        return self.engine.dialect.identifier_preparer.quote(identifier)

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        with self.engine.connect() as conn:
            yield conn

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        # Commits on normal exit, rolls back when the block raises
        with self.engine.begin() as conn:
            yield conn

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database engine disposed")
            self._engine = None

    def __enter__(self) -> 'Database':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()
