import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, Optional

from .errors import TableEditorError, ErrorCodes
from .models import RowsResult, TableDescription, TableList, WriteResult
from .service import TableEditorService

logger = logging.getLogger(__name__)

_service: Optional[TableEditorService] = None


def bind_service(service: TableEditorService) -> None:
    """Install the service the tool functions work against (once, at startup)."""
    global _service
    _service = service


def release_service() -> None:
    global _service
    _service = None


def get_service() -> TableEditorService:
    if _service is None:
        raise TableEditorError(ErrorCodes.CONFIGURATION, "Table editor service is not bound")
    return _service


def _json_safe(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return value


def list_tables() -> TableList:
    """
    List the user tables in the database.
    System catalog tables are excluded.
    """
    return TableList(tables=get_service().list_tables())


def describe_table(table_name: str) -> TableDescription:
    """
    Describe a table: its columns (normalized type, nullability, primary key,
    auto-generated flag, max length) and the form fields for a new record.
    Args:
        table_name: The name of the table.
    """
    return get_service().describe_table(table_name)


def list_rows(table_name: str) -> RowsResult:
    """
    Return every row of a table.
    Args:
        table_name: Letters, digits and underscores only.
    """
    rows = [
        {key: _json_safe(value) for key, value in row.items()}
        for row in get_service().list_rows(table_name)
    ]
    columns = list(rows[0]) if rows else [c.name for c in get_service().get_columns(table_name)]
    return RowsResult(table=table_name, columns=columns, rows=rows, row_count=len(rows))


def insert_row(table_name: str, row: Dict[str, Any]) -> WriteResult:
    """
    Insert a record. Values are given as text and converted to the column types;
    auto-generated columns are filled in by the database.
    Args:
        table_name: The table to insert into.
        row: Column name to value.
    """
    affected = get_service().insert_row(table_name, row)
    return WriteResult(table=table_name, operation="insert", affected_rows=affected)


def update_row(table_name: str, row: Dict[str, Any], primary_key_value: Any) -> WriteResult:
    """
    Update the columns given in `row` for the record whose primary key equals
    `primary_key_value`.
    """
    affected = get_service().update_row(table_name, row, primary_key_value)
    return WriteResult(table=table_name, operation="update", affected_rows=affected)


def delete_row(table_name: str, primary_key_value: Any) -> WriteResult:
    """Delete the record whose primary key equals `primary_key_value`."""
    affected = get_service().delete_row(table_name, primary_key_value)
    return WriteResult(table=table_name, operation="delete", affected_rows=affected)


def refresh_schema(table_name: Optional[str] = None) -> str:
    """
    Refresh the column metadata cache.
    Call this if the database schema has changed.
    """
    get_service().refresh_schema(table_name)
    return "Schema cache refreshed."
