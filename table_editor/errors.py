from enum import Enum
from typing import Any, Dict, Optional


class ErrorCodes(Enum):
    SCHEMA_ACCESS = "schema_access"
    TABLE_NOT_FOUND = "table_not_found"
    INVALID_IDENTIFIER = "invalid_identifier"
    VALIDATION_FAILED = "validation_failed"
    NO_PRIMARY_KEY = "no_primary_key"
    EMPTY_UPDATE = "empty_update"
    STORE_EXECUTION = "store_execution"
    CONFIGURATION = "configuration"


class ValidationReason(str, Enum):
    REQUIRED = "REQUIRED"
    TYPE_MISMATCH = "TYPE_MISMATCH"


class TableEditorError(Exception):
    def __init__(self, code: ErrorCodes, message: str, details: Optional[str] = None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(f"{code.value}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        """Structured form for consumers that render their own messages."""
        return {"code": self.code.value, "message": self.message, "details": self.details}


class SchemaAccessError(TableEditorError):
    def __init__(self, message: str, table: Optional[str] = None, details: Optional[str] = None,
                 code: ErrorCodes = ErrorCodes.SCHEMA_ACCESS):
        self.table = table
        super().__init__(code, message, details)

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "table": self.table}


class InvalidIdentifierError(TableEditorError):
    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(ErrorCodes.INVALID_IDENTIFIER, f"Invalid table name: {identifier}")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "identifier": self.identifier}


class ValidationError(TableEditorError):
    def __init__(self, column: str, reason: ValidationReason, expected_type: Optional[str] = None):
        self.column = column
        self.reason = reason
        self.expected_type = expected_type
        if reason is ValidationReason.REQUIRED:
            message = f"Column '{column}' cannot be null or empty"
        else:
            message = f"Column '{column}' must be a valid {expected_type}"
        super().__init__(ErrorCodes.VALIDATION_FAILED, message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "column": self.column,
            "reason": self.reason.value,
            "expected_type": self.expected_type,
        }


class NoPrimaryKeyError(TableEditorError):
    def __init__(self, table: str):
        self.table = table
        super().__init__(ErrorCodes.NO_PRIMARY_KEY, f"No primary key found for table: {table}")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "table": self.table}


class EmptyUpdateError(TableEditorError):
    def __init__(self, table: str):
        self.table = table
        super().__init__(ErrorCodes.EMPTY_UPDATE, f"No updatable columns supplied for table: {table}")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "table": self.table}


class StoreExecutionError(TableEditorError):
    def __init__(self, message: str, table: Optional[str] = None, statement: Optional[str] = None):
        self.table = table
        self.statement = statement
        super().__init__(ErrorCodes.STORE_EXECUTION, message, details=statement)

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "table": self.table}


class ConfigurationError(TableEditorError):
    def __init__(self, message: str):
        super().__init__(ErrorCodes.CONFIGURATION, message)
