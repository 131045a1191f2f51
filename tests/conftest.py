import pytest
from sqlalchemy import text

from table_editor import Database, SchemaIntrospector, TableEditorService
from table_editor import tools
from table_editor.sample_data import seed_sample_data

SCENARIO_DDL = [
    """
    CREATE TABLE PRODUCTS (
        ID INTEGER PRIMARY KEY AUTOINCREMENT,
        PRODUCT_NAME VARCHAR(255) NOT NULL,
        PRICE DECIMAL(10,2) NOT NULL,
        ACTIVE BOOLEAN
    )
    """,
    """
    CREATE TABLE NOTES (
        BODY TEXT NOT NULL,
        CREATED_ON DATE
    )
    """,
    """
    CREATE TABLE EVENTS (
        ID INTEGER PRIMARY KEY,
        TITLE VARCHAR(80) NOT NULL,
        HAPPENED_AT TIMESTAMP,
        ON_DAY DATE,
        ATTENDEES INT
    )
    """,
    "CREATE TABLE SYSTEM_AUDIT (ID INTEGER PRIMARY KEY, ENTRY TEXT)",
]


# Fresh SQLite file per test, disposed afterwards
@pytest.fixture
def database(tmp_path):
    db = Database.from_url(f"sqlite:///{tmp_path / 'editor.db'}")
    with db.begin() as conn:
        for ddl in SCENARIO_DDL:
            conn.execute(text(ddl))
    yield db
    db.dispose()


@pytest.fixture
def service(database):
    return TableEditorService(database)


@pytest.fixture
def strict_service(database):
    return TableEditorService(database, strict_coercion=True)


@pytest.fixture
def sample_database(tmp_path):
    db = Database.from_url(f"sqlite:///{tmp_path / 'sample.db'}")
    seed_sample_data(db)
    yield db
    db.dispose()


@pytest.fixture
def bound_tools(sample_database):
    tools.bind_service(TableEditorService(sample_database, SchemaIntrospector(sample_database)))
    yield tools
    tools.release_service()


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
