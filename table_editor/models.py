from enum import Enum
from typing import List, Any, Optional, Dict
from pydantic import BaseModel, ConfigDict

from .datatypes import DataType


class WriteMode(str, Enum):
    INSERT = "insert"
    UPDATE = "update"


class ColumnMetadata(BaseModel):
    """Snapshot of one column as reported by the catalog. Never mutated."""
    model_config = ConfigDict(frozen=True)

    name: str
    data_type: DataType
    native_type: str = ""
    nullable: bool = True
    is_primary_key: bool = False
    is_auto_generated: bool = False
    max_length: Optional[int] = None


class FieldSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    data_type: DataType
    value: str = ""
    required: bool = False
    read_only: bool = False
    helper_text: str = ""
    max_length: Optional[int] = None


class TableList(BaseModel):
    tables: List[str]


class TableDescription(BaseModel):
    table: str
    columns: List[ColumnMetadata]
    primary_key: Optional[str] = None
    fields: List[FieldSpec]


class RowsResult(BaseModel):
    table: str
    columns: List[str]
    rows: List[Dict[str, Any]]
    row_count: int


class WriteResult(BaseModel):
    table: str
    operation: str
    affected_rows: int
