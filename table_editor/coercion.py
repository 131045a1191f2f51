"""
Validation and coercion of raw (text) input against column metadata.

Both are pure functions dispatched on DataType. Coercion is best effort by
default: a value that fails to convert is written as its trimmed text, and
it is validate() that is expected to have rejected it first. Passing
strict=True makes coercion authoritative instead.
"""
import logging
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .datatypes import DataType
from .errors import ValidationError, ValidationReason
from .models import ColumnMetadata, WriteMode

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def as_text(value: Any) -> Optional[str]:
    """Trimmed text form of a raw value; None when absent or blank."""
    if value is None:
        return None
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value).strip()
    return text or None


def _date_segments(text: str) -> int:
    # Trailing empty segments do not count: "2024-01-" has two
    segments = text.split("-")
    while segments and segments[-1] == "":
        segments.pop()
    return len(segments)


_CHECKS: Dict[DataType, Callable[[str], bool]] = {
    DataType.INTEGER: lambda text: bool(_INTEGER_RE.match(text)),
    DataType.DECIMAL: lambda text: bool(_DECIMAL_RE.match(text)),
    DataType.BOOLEAN: lambda text: text.lower() in ("true", "false"),
    DataType.DATE: lambda text: _date_segments(text) == 3,
    DataType.TIMESTAMP: lambda text: True,
    DataType.TEXT: lambda text: True,
}


def _to_integer(text: str) -> int:
    if not _INTEGER_RE.match(text):
        raise ValueError(f"not an integer: {text!r}")
    return int(text)


def _to_decimal(text: str) -> float:
    if not _DECIMAL_RE.match(text):
        raise ValueError(f"not a decimal number: {text!r}")
    return float(text)


def _to_date(text: str) -> date:
    return datetime.strptime(text, "%Y-%m-%d").date()


_CONVERTERS: Dict[DataType, Callable[[str], Any]] = {
    DataType.INTEGER: _to_integer,
    DataType.DECIMAL: _to_decimal,
    DataType.BOOLEAN: lambda text: text.lower() == "true",
    DataType.DATE: _to_date,
    DataType.TIMESTAMP: datetime.fromisoformat,
    DataType.TEXT: lambda text: text,
}


def is_valid(text: str, data_type: DataType) -> bool:
    """Syntactic check of non-blank text for one column type."""
    return _CHECKS[data_type](text)


def coerce(value: Any, data_type: DataType, strict: bool = False, column: str = "") -> Any:
    """
    Convert a raw value to the column's native representation.

    Blank or absent input becomes None. On a failed conversion the trimmed
    text is returned unchanged, unless strict is set, in which case a
    TYPE_MISMATCH ValidationError is raised.
    """
    text = as_text(value)
    if text is None:
        return None
    try:
        return _CONVERTERS[data_type](text)
    except ValueError:
        if strict:
            raise ValidationError(column, ValidationReason.TYPE_MISMATCH, data_type.value)
        logger.warning(f"Could not convert {column or 'value'} to {data_type.value}, writing it as text")
        return text


def _skipped(column: ColumnMetadata, mode: WriteMode) -> bool:
    return mode is WriteMode.INSERT and column.is_auto_generated


def collect_validation_errors(
    columns: Sequence[ColumnMetadata],
    raw_row: Mapping[str, Any],
    mode: WriteMode,
    strict: bool = False,
) -> List[ValidationError]:
    """Every validation failure, in column order."""
    errors = []
    for column in columns:
        if _skipped(column, mode):
            continue

        text = as_text(raw_row.get(column.name))
        if text is None:
            if not column.nullable:
                errors.append(ValidationError(column.name, ValidationReason.REQUIRED))
            continue

        ok = is_valid(text, column.data_type)
        if ok and strict:
            try:
                _CONVERTERS[column.data_type](text)
            except ValueError:
                ok = False
        if not ok:
            errors.append(ValidationError(column.name, ValidationReason.TYPE_MISMATCH, column.data_type.value))
    return errors


def validate(
    columns: Sequence[ColumnMetadata],
    raw_row: Mapping[str, Any],
    mode: WriteMode,
    strict: bool = False,
) -> None:
    """Raise the first failure in column order, if any."""
    errors = collect_validation_errors(columns, raw_row, mode, strict=strict)
    if errors:
        raise errors[0]
