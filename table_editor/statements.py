"""
SQL statement builders for arbitrary tables.

Values are always bound parameters (:p0, :p1, ...). The table name is the
only identifier that can come from the caller, so it must match
SAFE_IDENTIFIER before any SQL is built; column names come from the catalog.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Sequence

from .errors import InvalidIdentifierError
from .models import ColumnMetadata

SAFE_IDENTIFIER = re.compile(r"^[A-Za-z0-9_]+$")

Quote = Callable[[str], str]
Coerce = Callable[[Any, ColumnMetadata], Any]


def _no_quote(name: str) -> str:
    return name


def _pass_through(value: Any, column: ColumnMetadata) -> Any:
    return value


@dataclass(frozen=True)
class Statement:
    sql: str
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def param_names(self) -> List[str]:
        return list(self.params)


def check_identifier(table_name: str) -> str:
    if not isinstance(table_name, str) or not SAFE_IDENTIFIER.match(table_name):
        raise InvalidIdentifierError(str(table_name))
    return table_name


class _Params:
    def __init__(self):
        self.values: Dict[str, Any] = {}

    def add(self, value: Any) -> str:
        name = f"p{len(self.values)}"
        self.values[name] = value
        return f":{name}"


def build_select(table_name: str, quote: Quote = _no_quote) -> Statement:
    table = quote(check_identifier(table_name))
    return Statement(f"SELECT * FROM {table}")


def build_insert(
    table_name: str,
    columns: Sequence[ColumnMetadata],
    row: Mapping[str, Any],
    coerce: Coerce = _pass_through,
    quote: Quote = _no_quote,
) -> Statement:
    """
    Include every non-generated column whose key is present in `row`,
    even when its value is None. Absent keys are left to store defaults.
    """
    table = quote(check_identifier(table_name))
    params = _Params()
    names, placeholders = [], []
    for column in columns:
        if column.is_auto_generated or column.name not in row:
            continue
        names.append(quote(column.name))
        placeholders.append(params.add(coerce(row[column.name], column)))

    sql = f"INSERT INTO {table} ({', '.join(names)}) VALUES ({', '.join(placeholders)})"
    return Statement(sql, params.values)


def updatable_columns(columns: Sequence[ColumnMetadata], row: Mapping[str, Any]) -> List[ColumnMetadata]:
    return [
        c for c in columns
        if not c.is_primary_key and not c.is_auto_generated and c.name in row
    ]


def build_update(
    table_name: str,
    columns: Sequence[ColumnMetadata],
    row: Mapping[str, Any],
    primary_key: ColumnMetadata,
    primary_key_value: Any,
    coerce: Coerce = _pass_through,
    quote: Quote = _no_quote,
) -> Statement:
    """The key value is bound last. Zero settable columns yields an empty SET list."""
    table = quote(check_identifier(table_name))
    params = _Params()
    assignments = [
        f"{quote(c.name)} = {params.add(coerce(row[c.name], c))}"
        for c in updatable_columns(columns, row)
    ]
    key = params.add(primary_key_value)
    sql = f"UPDATE {table} SET {', '.join(assignments)} WHERE {quote(primary_key.name)} = {key}"
    return Statement(sql, params.values)


def build_delete(
    table_name: str,
    primary_key: ColumnMetadata,
    primary_key_value: Any,
    quote: Quote = _no_quote,
) -> Statement:
    table = quote(check_identifier(table_name))
    params = _Params()
    key = params.add(primary_key_value)
    return Statement(f"DELETE FROM {table} WHERE {quote(primary_key.name)} = {key}", params.values)

