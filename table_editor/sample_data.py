"""Demo tables for a fresh database: employees, products and customers."""
import logging
from datetime import date
from typing import Any, Dict, List

from sqlalchemy import (
    DECIMAL,
    Boolean,
    Column,
    Date,
    Integer,
    MetaData,
    String,
    Table,
    TIMESTAMP,
    func,
    select,
    true,
)

from .db import Database

logger = logging.getLogger(__name__)

# create_all renders each dialect's own auto-increment DDL
SAMPLE_SCHEMA = MetaData()

EMPLOYEES = Table(
    "EMPLOYEES", SAMPLE_SCHEMA,
    Column("ID", Integer, primary_key=True, autoincrement=True),
    Column("FIRST_NAME", String(100), nullable=False),
    Column("LAST_NAME", String(100), nullable=False),
    Column("EMAIL", String(255), nullable=False),
    Column("DEPARTMENT", String(100)),
    Column("SALARY", DECIMAL(10, 2)),
    Column("HIRE_DATE", Date),
    sqlite_autoincrement=True,
)

PRODUCTS = Table(
    "PRODUCTS", SAMPLE_SCHEMA,
    Column("ID", Integer, primary_key=True, autoincrement=True),
    Column("PRODUCT_NAME", String(255), nullable=False),
    Column("DESCRIPTION", String(500)),
    Column("PRICE", DECIMAL(10, 2), nullable=False),
    Column("QUANTITY", Integer, nullable=False),
    Column("ACTIVE", Boolean, server_default=true()),
    sqlite_autoincrement=True,
)

CUSTOMERS = Table(
    "CUSTOMERS", SAMPLE_SCHEMA,
    Column("ID", Integer, primary_key=True, autoincrement=True),
    Column("CUSTOMER_NAME", String(255), nullable=False),
    Column("CONTACT_EMAIL", String(255)),
    Column("PHONE", String(50)),
    Column("ADDRESS", String(500)),
    Column("CREATED_DATE", TIMESTAMP, server_default=func.current_timestamp()),
    sqlite_autoincrement=True,
)

SAMPLE_ROWS: Dict[str, List[Dict[str, Any]]] = {
    "EMPLOYEES": [
        {"FIRST_NAME": "John", "LAST_NAME": "Doe", "EMAIL": "john.doe@example.com",
         "DEPARTMENT": "Engineering", "SALARY": 75000.00, "HIRE_DATE": date(2020, 1, 15)},
        {"FIRST_NAME": "Jane", "LAST_NAME": "Smith", "EMAIL": "jane.smith@example.com",
         "DEPARTMENT": "Marketing", "SALARY": 65000.00, "HIRE_DATE": date(2021, 3, 20)},
        {"FIRST_NAME": "Bob", "LAST_NAME": "Johnson", "EMAIL": "bob.johnson@example.com",
         "DEPARTMENT": "Sales", "SALARY": 70000.00, "HIRE_DATE": date(2019, 11, 10)},
    ],
    "PRODUCTS": [
        {"PRODUCT_NAME": "Laptop", "DESCRIPTION": "High-performance laptop",
         "PRICE": 1299.99, "QUANTITY": 50, "ACTIVE": True},
        {"PRODUCT_NAME": "Mouse", "DESCRIPTION": "Wireless mouse",
         "PRICE": 29.99, "QUANTITY": 200, "ACTIVE": True},
        {"PRODUCT_NAME": "Keyboard", "DESCRIPTION": "Mechanical keyboard",
         "PRICE": 89.99, "QUANTITY": 100, "ACTIVE": True},
    ],
    "CUSTOMERS": [
        {"CUSTOMER_NAME": "Acme Corp", "CONTACT_EMAIL": "contact@acme.com",
         "PHONE": "555-0100", "ADDRESS": "123 Business St"},
        {"CUSTOMER_NAME": "Tech Solutions", "CONTACT_EMAIL": "info@techsol.com",
         "PHONE": "555-0200", "ADDRESS": "456 Innovation Ave"},
        {"CUSTOMER_NAME": "Global Enterprises", "CONTACT_EMAIL": "hello@global.com",
         "PHONE": "555-0300", "ADDRESS": "789 Commerce Blvd"},
    ],
}


def seed_sample_data(database: Database) -> Dict[str, int]:
    """
    Create the demo tables if missing and fill the empty ones.
    Returns the number of rows inserted per table.
    """
    inserted = {}
    with database.begin() as conn:
        SAMPLE_SCHEMA.create_all(conn, checkfirst=True)
        for table in SAMPLE_SCHEMA.sorted_tables:
            count = conn.execute(select(func.count()).select_from(table)).scalar()
            if count:
                inserted[table.name] = 0
                continue
            rows = SAMPLE_ROWS[table.name]
            conn.execute(table.insert(), rows)
            inserted[table.name] = len(rows)
    logger.info(f"Sample data seeded: {inserted}")
    return inserted
