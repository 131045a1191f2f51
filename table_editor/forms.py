"""Form field descriptions derived from column metadata, for editing UIs."""
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .datatypes import DataType
from .models import ColumnMetadata, FieldSpec

TYPE_HINTS: Dict[DataType, str] = {
    DataType.INTEGER: "Integer value",
    DataType.DECIMAL: "Decimal number",
    DataType.BOOLEAN: "true or false",
    DataType.DATE: "Format: YYYY-MM-DD",
    DataType.TIMESTAMP: "Format: YYYY-MM-DD HH:MM:SS",
}


def helper_text(column: ColumnMetadata) -> str:
    hints = []
    if column.is_primary_key:
        hints.append("Primary Key")
    if column.is_auto_generated:
        hints.append("Auto-increment")
    if not column.nullable:
        hints.append("Required")
    if column.data_type in TYPE_HINTS:
        hints.append(TYPE_HINTS[column.data_type])
    if column.max_length:
        hints.append(f"Max length: {column.max_length}")
    return " | ".join(hints)


def build_field_spec(column: ColumnMetadata, editing: bool, value: Any = None) -> Optional[FieldSpec]:
    # Generated columns have nothing to fill in on a new record
    if not editing and column.is_auto_generated:
        return None
    return FieldSpec(
        name=column.name,
        label=column.name,
        data_type=column.data_type,
        value="" if value is None else str(value),
        required=not column.nullable and not column.is_auto_generated,
        read_only=editing and column.is_primary_key,
        helper_text=helper_text(column),
        max_length=column.max_length,
    )


def build_form(
    columns: Sequence[ColumnMetadata],
    row: Optional[Mapping[str, Any]] = None,
    editing: bool = False,
) -> List[FieldSpec]:
    row = row or {}
    fields = [build_field_spec(c, editing, row.get(c.name)) for c in columns]
    return [f for f in fields if f is not None]


def primary_key_value(columns: Sequence[ColumnMetadata], row: Mapping[str, Any]) -> Any:
    """Key value of a listed row, or None when the table has no primary key."""
    for column in columns:
        if column.is_primary_key:
            return row.get(column.name)
    return None
