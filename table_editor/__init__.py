"""Schema-driven record editor: CRUD over any table of a relational database."""
from .config import EditorConfig
from .datatypes import DataType, build_type_normalizer
from .db import Database
from .errors import (
    EmptyUpdateError,
    ErrorCodes,
    InvalidIdentifierError,
    NoPrimaryKeyError,
    SchemaAccessError,
    StoreExecutionError,
    TableEditorError,
    ValidationError,
    ValidationReason,
)
from .introspection import SchemaIntrospector, primary_key_column
from .models import ColumnMetadata, FieldSpec, WriteMode
from .service import TableEditorService

__all__ = [
    "ColumnMetadata",
    "DataType",
    "Database",
    "EditorConfig",
    "EmptyUpdateError",
    "ErrorCodes",
    "FieldSpec",
    "InvalidIdentifierError",
    "NoPrimaryKeyError",
    "SchemaAccessError",
    "SchemaIntrospector",
    "StoreExecutionError",
    "TableEditorError",
    "TableEditorService",
    "ValidationError",
    "ValidationReason",
    "WriteMode",
    "build_type_normalizer",
    "primary_key_column",
]
