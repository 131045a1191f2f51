import logging
import re
import threading
import time
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from sqlalchemy import inspect, text
from sqlalchemy.exc import CompileError, SQLAlchemyError

from .config import DEFAULT_EXCLUDED_PREFIXES
from .datatypes import build_type_normalizer
from .db import Database
from .errors import ErrorCodes, SchemaAccessError
from .models import ColumnMetadata

logger = logging.getLogger(__name__)

_WITHOUT_ROWID = re.compile(r"\bWITHOUT\s+ROWID\b", re.IGNORECASE)


class _CacheEntry(NamedTuple):
    columns: Tuple[ColumnMetadata, ...]
    fetched_at: float


def primary_key_column(columns: Iterable[ColumnMetadata]) -> Optional[ColumnMetadata]:
    """First primary-key column in catalog order; composite keys degrade to it."""
    return next((c for c in columns if c.is_primary_key), None)


class SchemaIntrospector:
    """
    Reads tables and column metadata through the SQLAlchemy Inspector.

    Column lists are cached per table for `ttl` seconds. The cache dict is
    never mutated in place: refreshes build a new dict and swap it in, so
    readers always see a complete entry.
    """

    def __init__(
        self,
        database: Database,
        excluded_prefixes: Sequence[str] = DEFAULT_EXCLUDED_PREFIXES,
        ttl: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.database = database
        self.excluded_prefixes = tuple(excluded_prefixes)
        self.ttl = ttl
        self._clock = clock
        self._normalize = build_type_normalizer(database.dialect_name)
        self._cache: Dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()

    def list_tables(self) -> List[str]:
        try:
            with self.database.connect() as conn:
                names = inspect(conn).get_table_names()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read table list: {e}")
            raise SchemaAccessError("Error fetching table list", details=str(e))

        return [name for name in names if not name.startswith(self.excluded_prefixes)]

    def get_columns(self, table_name: str) -> List[ColumnMetadata]:
        entry = self._cache.get(table_name)
        if entry is not None and self._is_fresh(entry):
            return list(entry.columns)

        columns = self._read_columns(table_name)
        if self.ttl > 0:
            with self._lock:
                updated = dict(self._cache)
                updated[table_name] = _CacheEntry(columns, self._clock())
                self._cache = updated
        return list(columns)

    def refresh(self, table_name: Optional[str] = None) -> None:
        """Drop cached metadata for one table, or for every table."""
        with self._lock:
            if table_name is None:
                self._cache = {}
            else:
                updated = dict(self._cache)
                updated.pop(table_name, None)
                self._cache = updated
        logger.info(f"Schema cache refreshed for {table_name or 'all tables'}")

    def _is_fresh(self, entry: _CacheEntry) -> bool:
        return self.ttl > 0 and (self._clock() - entry.fetched_at) < self.ttl

    def _read_columns(self, table_name: str) -> Tuple[ColumnMetadata, ...]:
        try:
            with self.database.connect() as conn:
                inspector = inspect(conn)
                if not inspector.has_table(table_name):
                    raise SchemaAccessError(
                        f"Table not found: {table_name}",
                        table=table_name,
                        code=ErrorCodes.TABLE_NOT_FOUND,
                    )
                pk = inspector.get_pk_constraint(table_name) or {}
                primary_keys = set(pk.get("constrained_columns") or [])
                reflected = inspector.get_columns(table_name)
                dialect = conn.dialect
                rowid_alias = None
                if dialect.name == "sqlite":
                    rowid_alias = self._sqlite_rowid_alias(conn, table_name, primary_keys)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read column metadata for {table_name}: {e}")
            raise SchemaAccessError(
                f"Error fetching column metadata for table: {table_name}",
                table=table_name,
                details=str(e),
            )

        columns = []
        for col in reflected:
            native = self._native_type_name(col["type"], dialect)
            data_type = self._normalize(native)
            is_pk = col["name"] in primary_keys
            columns.append(ColumnMetadata(
                name=col["name"],
                data_type=data_type,
                native_type=native,
                nullable=bool(col.get("nullable", True)),
                is_primary_key=is_pk,
                is_auto_generated=self._is_auto_generated(col, rowid_alias),
                max_length=self._max_length(col["type"]),
            ))

        logger.debug(f"Read {len(columns)} columns for {table_name}")
        return tuple(columns)

    @staticmethod
    def _native_type_name(sa_type, dialect) -> str:
        try:
            return sa_type.compile(dialect=dialect)
        except CompileError:
            # Types the dialect cannot render (NullType for untyped SQLite columns)
            return type(sa_type).__name__.upper()

    @staticmethod
    def _is_auto_generated(col: dict, rowid_alias: Optional[str]) -> bool:
        if col.get("autoincrement") is True or col.get("identity"):
            return True
        return col["name"] == rowid_alias

    @staticmethod
    def _sqlite_rowid_alias(conn, table_name: str, primary_keys: set) -> Optional[str]:
        """
        Name of the column aliasing the SQLite rowid, if any.

        Only a lone key column declared exactly INTEGER is an alias, and only
        in a rowid table. The reflected type cannot tell INT from INTEGER, so
        the declared type is read from PRAGMA table_info.
        """
        if len(primary_keys) != 1:
            return None
        ddl = conn.execute(
            text("SELECT sql FROM sqlite_master WHERE type = 'table' AND name = :name"),
            {"name": table_name},
        ).scalar()
        if ddl and _WITHOUT_ROWID.search(ddl):
            return None

        (key,) = primary_keys
        quoted = conn.dialect.identifier_preparer.quote(table_name)
        for row in conn.exec_driver_sql(f"PRAGMA table_info({quoted})").mappings():
            if row["name"] == key:
                return key if (row["type"] or "").strip().upper() == "INTEGER" else None
        return None

    @staticmethod
    def _max_length(sa_type) -> Optional[int]:
        length = getattr(sa_type, "length", None)
        if isinstance(length, int) and length > 0:
            return length
        return None
