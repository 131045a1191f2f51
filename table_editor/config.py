import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv
from sqlalchemy.engine.url import URL

from .errors import ConfigurationError

DEFAULT_EXCLUDED_PREFIXES = ("INFORMATION_SCHEMA", "SYSTEM_")
DEFAULT_DATABASE_URL = "sqlite:///table_editor.db"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_number(name: str, default, cast):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return cast(value.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got '{value}'")


def _database_url_from_env() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    # Assembled from the MYSQL_* variables when no DATABASE_URL is set
    host = os.getenv("MYSQL_HOST")
    if not host:
        return DEFAULT_DATABASE_URL

    return URL.create(
        drivername="mysql+pymysql",
        username=os.getenv("MYSQL_USER", "root"),
        password=os.getenv("MYSQL_PASS", ""),
        host=host,
        port=_env_number("MYSQL_PORT", 3306, int),
        database=os.getenv("MYSQL_DB"),
        query={"charset": "utf8mb4"},
    ).render_as_string(hide_password=False)


@dataclass
class EditorConfig:
    database_url: str = DEFAULT_DATABASE_URL
    excluded_prefixes: Tuple[str, ...] = field(default=DEFAULT_EXCLUDED_PREFIXES)
    metadata_ttl: float = 300.0
    strict_coercion: bool = False
    echo_sql: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'EditorConfig':
        load_dotenv(env_file)

        prefixes = os.getenv("TABLE_EDITOR_EXCLUDED_PREFIXES")
        if prefixes is None:
            excluded = DEFAULT_EXCLUDED_PREFIXES
        else:
            excluded = tuple(p.strip() for p in prefixes.split(",") if p.strip())

        ttl = _env_number("TABLE_EDITOR_METADATA_TTL", 300.0, float)
        if ttl < 0:
            raise ConfigurationError(f"TABLE_EDITOR_METADATA_TTL must not be negative, got {ttl}")

        return cls(
            database_url=_database_url_from_env(),
            excluded_prefixes=excluded,
            metadata_ttl=ttl,
            strict_coercion=_env_bool("TABLE_EDITOR_STRICT_COERCION"),
            echo_sql=_env_bool("TABLE_EDITOR_ECHO_SQL"),
            log_level=os.getenv("TABLE_EDITOR_LOG_LEVEL", "INFO").upper(),
            host=os.getenv("TABLE_EDITOR_HOST", "127.0.0.1"),
            port=_env_number("TABLE_EDITOR_PORT", 8000, int),
        )
