"""Normalized column types and the per-dialect mapping from native type names."""
from enum import Enum
from typing import Callable, Dict


class DataType(str, Enum):
    INTEGER = "INTEGER"
    DECIMAL = "DECIMAL"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"
    TEXT = "TEXT"


# Checked by equality before the generic rules, keyed by SQLAlchemy dialect name
DIALECT_ALIASES: Dict[str, Dict[str, DataType]] = {
    "mysql": {
        "TINYINT(1)": DataType.BOOLEAN,
        "DATETIME": DataType.TIMESTAMP,
    },
    "sqlite": {
        "DATETIME": DataType.TIMESTAMP,
    },
    "postgresql": {
        "TIMESTAMPTZ": DataType.TIMESTAMP,
    },
}

_FLOATING = {"REAL", "FLOAT", "DOUBLE", "DOUBLE PRECISION"}


def base_type_name(native_type_name: str) -> str:
    """'VARCHAR(100)' -> 'VARCHAR'"""
    return native_type_name.split("(", 1)[0].strip().upper()


def _normalize_base(type_name: str) -> DataType:
    if "INT" in type_name:
        return DataType.INTEGER
    if "DECIMAL" in type_name or "NUMERIC" in type_name:
        return DataType.DECIMAL
    if type_name in ("BOOLEAN", "BOOL"):
        return DataType.BOOLEAN
    if type_name == "DATE":
        return DataType.DATE
    if type_name.startswith("TIMESTAMP"):
        return DataType.TIMESTAMP
    if type_name in _FLOATING:
        return DataType.DECIMAL
    return DataType.TEXT


def build_type_normalizer(dialect_name: str = "") -> Callable[[str], DataType]:
    """
    Build the native-type-name -> DataType mapping for one dialect.
    Results are memoized per normalizer, so each distinct type name is
    classified once.
    """
    aliases = DIALECT_ALIASES.get(dialect_name, {})
    seen: Dict[str, DataType] = {}

    def normalize(native_type_name: str) -> DataType:
        key = (native_type_name or "").strip().upper()
        if key in seen:
            return seen[key]
        if key in aliases:
            result = aliases[key]
        else:
            base = base_type_name(key)
            result = aliases.get(base) or _normalize_base(base)
        seen[key] = result
        return result

    return normalize
