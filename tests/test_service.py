from datetime import date

import pytest
from sqlalchemy import text

from table_editor import (
    EmptyUpdateError,
    InvalidIdentifierError,
    NoPrimaryKeyError,
    SchemaAccessError,
    StoreExecutionError,
    ValidationError,
    ValidationReason,
)
from table_editor.coercion import coerce


def product_ids(service):
    return [row["ID"] for row in service.list_rows("PRODUCTS")]


def test_products_scenario(service):
    """Insert, update one column, delete, and the row is gone"""
    service.insert_row("PRODUCTS", {"PRODUCT_NAME": "Widget", "PRICE": "9.99", "ACTIVE": "true"})
    (row,) = service.list_rows("PRODUCTS")
    assert row["ID"] == 1
    assert row["PRODUCT_NAME"] == "Widget"
    assert row["PRICE"] == 9.99
    assert row["ACTIVE"] == 1

    assert service.update_row("PRODUCTS", {"PRICE": "12.50"}, 1) == 1
    (row,) = service.list_rows("PRODUCTS")
    assert row["PRICE"] == 12.5
    assert row["PRODUCT_NAME"] == "Widget"
    assert row["ACTIVE"] == 1

    assert service.delete_row("PRODUCTS", 1) == 1
    assert 1 not in product_ids(service)


def test_round_trip_equals_coerced_values(service):
    values = {"TITLE": "  Launch  ", "ATTENDEES": "120", "ON_DAY": "2024-05-01"}
    service.insert_row("EVENTS", values)
    (row,) = service.list_rows("EVENTS")

    assert row["TITLE"] == coerce(values["TITLE"], service.get_columns("EVENTS")[1].data_type)
    assert row["ATTENDEES"] == 120
    # SQLite keeps dates as ISO text
    assert row["ON_DAY"] == date(2024, 5, 1).isoformat()


def test_row_keys_are_column_names(service):
    service.insert_row("PRODUCTS", {"PRODUCT_NAME": "Widget", "PRICE": "1"})
    names = {c.name for c in service.get_columns("PRODUCTS")}
    for row in service.list_rows("PRODUCTS"):
        assert set(row) <= names


def test_insert_validates_first(service):
    with pytest.raises(ValidationError) as exc:
        service.insert_row("PRODUCTS", {"PRODUCT_NAME": "Widget", "PRICE": "cheap"})
    assert exc.value.column == "PRICE"
    assert exc.value.reason is ValidationReason.TYPE_MISMATCH
    assert service.list_rows("PRODUCTS") == []


def test_insert_missing_required_column(service):
    with pytest.raises(ValidationError) as exc:
        service.insert_row("PRODUCTS", {"PRICE": "1.00"})
    assert exc.value.column == "PRODUCT_NAME"
    assert exc.value.reason is ValidationReason.REQUIRED


def test_generated_key_in_insert_row_is_ignored(service):
    service.insert_row("PRODUCTS", {"ID": 99, "PRODUCT_NAME": "Widget", "PRICE": "1"})
    assert product_ids(service) == [1]


def test_explicit_int_key_is_written(service, database):
    """An INT key is not the rowid, so the caller's value is stored"""
    with database.begin() as conn:
        conn.execute(text("CREATE TABLE CODES (ID INT PRIMARY KEY, LABEL TEXT)"))
    assert service.insert_row("CODES", {"ID": "5", "LABEL": "five"}) == 1
    assert service.list_rows("CODES") == [{"ID": 5, "LABEL": "five"}]

    assert service.update_row("CODES", {"LABEL": "FIVE"}, 5) == 1
    assert service.list_rows("CODES") == [{"ID": 5, "LABEL": "FIVE"}]
    assert service.delete_row("CODES", 5) == 1
    assert service.list_rows("CODES") == []


def test_update_ignores_primary_key_in_row(service):
    service.insert_row("PRODUCTS", {"PRODUCT_NAME": "Widget", "PRICE": "1"})
    service.update_row("PRODUCTS", {"ID": 1, "PRODUCT_NAME": "Gadget"}, 1)
    (row,) = service.list_rows("PRODUCTS")
    assert row["ID"] == 1 and row["PRODUCT_NAME"] == "Gadget"


def test_update_checks_submitted_columns(service):
    service.insert_row("PRODUCTS", {"PRODUCT_NAME": "Widget", "PRICE": "1"})
    with pytest.raises(ValidationError) as exc:
        service.update_row("PRODUCTS", {"PRODUCT_NAME": " "}, 1)
    assert exc.value.reason is ValidationReason.REQUIRED


def test_update_blank_generated_key_is_required(service):
    service.insert_row("PRODUCTS", {"PRODUCT_NAME": "Widget", "PRICE": "1"})
    # SQLite reports the rowid key as nullable, so force a non-nullable snapshot
    columns = [
        c.model_copy(update={"nullable": False}) if c.name == "ID" else c
        for c in service.get_columns("PRODUCTS")
    ]
    service.introspector.get_columns = lambda table_name: columns
    with pytest.raises(ValidationError) as exc:
        service.update_row("PRODUCTS", {"ID": "", "PRICE": "2"}, 1)
    assert exc.value.column == "ID"


def test_empty_update_is_rejected(service):
    service.insert_row("PRODUCTS", {"PRODUCT_NAME": "Widget", "PRICE": "1"})
    with pytest.raises(EmptyUpdateError):
        service.update_row("PRODUCTS", {"ID": 1}, 1)


def test_keyless_table(service):
    """Listing and inserting work, updating and deleting do not"""
    service.insert_row("NOTES", {"BODY": "remember the milk", "CREATED_ON": "2024-02-29"})
    assert service.list_rows("NOTES") == [{"BODY": "remember the milk", "CREATED_ON": "2024-02-29"}]

    with pytest.raises(NoPrimaryKeyError) as exc:
        service.update_row("NOTES", {"BODY": "x"}, 1)
    assert exc.value.table == "NOTES"
    with pytest.raises(NoPrimaryKeyError):
        service.delete_row("NOTES", 1)


def test_injection_attempt_touches_nothing(service, monkeypatch):
    def no_connection():
        raise AssertionError("store accessed")

    monkeypatch.setattr(service.database, "connect", no_connection)
    monkeypatch.setattr(service.database, "begin", no_connection)
    with pytest.raises(InvalidIdentifierError):
        service.list_rows("users; DROP TABLE users")
    with pytest.raises(InvalidIdentifierError):
        service.insert_row("users; DROP TABLE users", {})


def test_unknown_table_listing_is_store_error(service):
    with pytest.raises(StoreExecutionError) as exc:
        service.list_rows("MISSING")
    assert "no such table" in exc.value.message
    assert exc.value.table == "MISSING"


def test_listing_on_disposed_handle_is_store_error(service, database):
    database.dispose()
    with pytest.raises(StoreExecutionError) as exc:
        service.list_rows("PRODUCTS")
    assert exc.value.table == "PRODUCTS"
    assert "disposed" in exc.value.message
    assert exc.value.statement == "SELECT * FROM PRODUCTS"


def test_unknown_table_insert_is_schema_error(service):
    with pytest.raises(SchemaAccessError):
        service.insert_row("MISSING", {"A": "1"})


def test_constraint_violation_is_store_error(service, database):
    with database.begin() as conn:
        conn.execute(text("CREATE UNIQUE INDEX UX_NAME ON PRODUCTS (PRODUCT_NAME)"))
    service.insert_row("PRODUCTS", {"PRODUCT_NAME": "Widget", "PRICE": "1"})
    with pytest.raises(StoreExecutionError) as exc:
        service.insert_row("PRODUCTS", {"PRODUCT_NAME": "Widget", "PRICE": "2"})
    assert "UNIQUE" in exc.value.message
    assert exc.value.statement.startswith("INSERT INTO")
    # the failed write was rolled back, the first one kept
    assert len(service.list_rows("PRODUCTS")) == 1


def test_lenient_timestamp_is_written_as_text(service):
    service.insert_row("EVENTS", {"TITLE": "t", "HAPPENED_AT": "soon"})
    (row,) = service.list_rows("EVENTS")
    assert row["HAPPENED_AT"] == "soon"


def test_strict_timestamp_is_rejected(strict_service):
    with pytest.raises(ValidationError) as exc:
        strict_service.insert_row("EVENTS", {"TITLE": "t", "HAPPENED_AT": "soon"})
    assert exc.value.column == "HAPPENED_AT"
    assert strict_service.list_rows("EVENTS") == []


def test_delete_missing_row_affects_nothing(service):
    assert service.delete_row("PRODUCTS", 42) == 0


def test_describe_table(service):
    description = service.describe_table("PRODUCTS")
    assert description.primary_key == "ID"
    assert [f.name for f in description.fields] == ["PRODUCT_NAME", "PRICE", "ACTIVE"]
    assert service.describe_table("NOTES").primary_key is None
