import argparse
import json
import logging
from functools import wraps
from typing import Any, Dict, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from . import tools
from .config import EditorConfig
from .db import Database
from .errors import TableEditorError
from .introspection import SchemaIntrospector
from .models import RowsResult, TableDescription, TableList, WriteResult
from .sample_data import seed_sample_data
from .service import TableEditorService

logger = logging.getLogger(__name__)

# Initialize FastMCP
mcp = FastMCP("Table Editor")


def _reported(func):
    """Turn engine errors into tool errors carrying their structured form."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TableEditorError as e:
            logger.info(f"{func.__name__} failed: {e}")
            raise ToolError(json.dumps(e.to_dict())) from e
    return wrapper


@mcp.tool()
@_reported
def list_tables() -> TableList:
    """
    List the user tables in the database.
    Start here to find out which tables can be edited.
    """
    return tools.list_tables()


@mcp.tool()
@_reported
def describe_table(table_name: str) -> TableDescription:
    """
    Get the columns of a table and the fields needed to add a record.
    Args:
        table_name: The name of the table.
    """
    return tools.describe_table(table_name)


@mcp.tool()
@_reported
def list_rows(table_name: str) -> RowsResult:
    """
    Get all rows of a table.
    Args:
        table_name: The name of the table (letters, digits, underscores).
    """
    return tools.list_rows(table_name)


@mcp.tool()
@_reported
def insert_row(table_name: str, row: Dict[str, Any]) -> WriteResult:
    """
    Insert a new record.
    Args:
        table_name: The table to insert into.
        row: Column name to value, values as text (e.g. "9.99", "true", "2024-01-15").
    """
    return tools.insert_row(table_name, row)


@mcp.tool()
@_reported
def update_row(table_name: str, row: Dict[str, Any], primary_key_value: Any) -> WriteResult:
    """
    Update an existing record. Only the columns present in `row` change.
    Args:
        table_name: The table to update.
        row: Column name to new value.
        primary_key_value: Primary key of the record, as returned by list_rows.
    """
    return tools.update_row(table_name, row, primary_key_value)


@mcp.tool()
@_reported
def delete_row(table_name: str, primary_key_value: Any) -> WriteResult:
    """
    Delete a record.
    Args:
        table_name: The table to delete from.
        primary_key_value: Primary key of the record, as returned by list_rows.
    """
    return tools.delete_row(table_name, primary_key_value)


@mcp.tool()
@_reported
def refresh_schema(table_name: Optional[str] = None) -> str:
    """
    Refresh the schema cache.
    Call this if the database schema has changed.
    """
    return tools.refresh_schema(table_name)


def build_service(config: EditorConfig, database: Database) -> TableEditorService:
    introspector = SchemaIntrospector(
        database,
        excluded_prefixes=config.excluded_prefixes,
        ttl=config.metadata_ttl,
    )
    return TableEditorService(database, introspector, strict_coercion=config.strict_coercion)


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Schema-driven table editor over MCP")
    parser.add_argument("--seed", action="store_true", help="create and fill the sample tables")
    parser.add_argument("--env-file", default=None)
    args = parser.parse_args(argv)

    config = EditorConfig.from_env(args.env_file)
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))

    database = Database.from_config(config)
    try:
        if args.seed:
            seed_sample_data(database)
        tools.bind_service(build_service(config, database))
        logger.info(f"Starting Table Editor MCP Server on http://{config.host}:{config.port}/sse")
        mcp.run(transport="sse", host=config.host, port=config.port)
    finally:
        tools.release_service()
        database.dispose()


if __name__ == "__main__":
    main()
