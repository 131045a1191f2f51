import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from .coercion import coerce, validate
from .db import Database
from .errors import EmptyUpdateError, NoPrimaryKeyError, SchemaAccessError, StoreExecutionError
from .forms import build_form
from .introspection import SchemaIntrospector, primary_key_column
from .models import ColumnMetadata, TableDescription, WriteMode
from .statements import (
    Statement,
    build_delete,
    build_insert,
    build_select,
    build_update,
    check_identifier,
    updatable_columns,
)

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class TableEditorService:
    """
    List/create/update/delete over any table, driven by catalog metadata.

    Stateless between calls apart from the introspector's metadata cache.
    """

    def __init__(
        self,
        database: Database,
        introspector: Optional[SchemaIntrospector] = None,
        strict_coercion: bool = False,
    ):
        self.database = database
        self.introspector = introspector or SchemaIntrospector(database)
        self.strict_coercion = strict_coercion

    # Schema

    def list_tables(self) -> List[str]:
        return self.introspector.list_tables()

    def get_columns(self, table_name: str) -> List[ColumnMetadata]:
        return self.introspector.get_columns(table_name)

    def refresh_schema(self, table_name: Optional[str] = None) -> None:
        self.introspector.refresh(table_name)

    def describe_table(self, table_name: str) -> TableDescription:
        columns = self.get_columns(table_name)
        pk = primary_key_column(columns)
        return TableDescription(
            table=table_name,
            columns=columns,
            primary_key=pk.name if pk else None,
            fields=build_form(columns),
        )

    # Rows

    def list_rows(self, table_name: str) -> List[Row]:
        statement = build_select(table_name)
        try:
            statement = build_select(table_name, quote=self.database.quote)
            with self.database.connect() as conn:
                result = conn.execute(text(statement.sql))
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            raise self._store_error(e, table_name, statement) from e
        except SchemaAccessError as e:
            # Disposed handle: the store cannot run the read at all
            logger.error(f"Cannot read rows of {table_name}: {e.message}")
            raise StoreExecutionError(e.message, table=table_name, statement=statement.sql) from e

    def insert_row(self, table_name: str, row: Mapping[str, Any]) -> int:
        check_identifier(table_name)
        columns = self.get_columns(table_name)
        validate(columns, row, WriteMode.INSERT, strict=self.strict_coercion)
        statement = build_insert(table_name, columns, row, coerce=self._coerce, quote=self.database.quote)
        return self._execute_write(table_name, statement)

    def update_row(self, table_name: str, row: Mapping[str, Any], primary_key_value: Any) -> int:
        check_identifier(table_name)
        columns = self.get_columns(table_name)
        pk = primary_key_column(columns)
        if pk is None:
            raise NoPrimaryKeyError(table_name)

        # Only the columns this update touches are checked
        submitted = [c for c in columns if c.name in row]
        validate(submitted, row, WriteMode.UPDATE, strict=self.strict_coercion)

        if not updatable_columns(columns, row):
            raise EmptyUpdateError(table_name)

        statement = build_update(
            table_name, columns, row, pk, primary_key_value,
            coerce=self._coerce, quote=self.database.quote,
        )
        return self._execute_write(table_name, statement)

    def delete_row(self, table_name: str, primary_key_value: Any) -> int:
        check_identifier(table_name)
        pk = primary_key_column(self.get_columns(table_name))
        if pk is None:
            raise NoPrimaryKeyError(table_name)

        statement = build_delete(table_name, pk, primary_key_value, quote=self.database.quote)
        return self._execute_write(table_name, statement)

    # Internals

    def _coerce(self, value: Any, column: ColumnMetadata) -> Any:
        return coerce(value, column.data_type, strict=self.strict_coercion, column=column.name)

    def _execute_write(self, table_name: str, statement: Statement) -> int:
        logger.debug(f"Executing {statement.sql} with {statement.param_names}")
        try:
            with self.database.begin() as conn:
                result = conn.execute(self._to_clause(statement))
                return result.rowcount
        except SQLAlchemyError as e:
            raise self._store_error(e, table_name, statement) from e

    @staticmethod
    def _to_clause(statement: Statement):
        # Bind types are inferred from the coerced values (dates, booleans, ...)
        binds = [bindparam(name, value) for name, value in statement.params.items()]
        return text(statement.sql).bindparams(*binds)

    @staticmethod
    def _store_error(error: SQLAlchemyError, table_name: str, statement: Statement) -> StoreExecutionError:
        # DBAPI errors carry the driver's own message in .orig
        message = str(getattr(error, "orig", None) or error)
        logger.error(f"Store rejected statement on {table_name}: {message}")
        return StoreExecutionError(message, table=table_name, statement=statement.sql)
