"""
Application settings.

Loads values from the environment (and backend/.env when present) into a
Settings dataclass. Also owns the one-time logging setup.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load .env from backend directory
_backend_dir = Path(__file__).parent.parent
_env_path = _backend_dir / ".env"
load_dotenv(_env_path)


# Defaults
CATALOG_URL = "https://famme.no/products.json"
IMPORT_LIMIT = 50
DESCRIPTION_MAX_LENGTH = 500
MAX_RESPONSE_BYTES = 2 * 1024 * 1024  # 2 MiB
REQUEST_TIMEOUT = 30
SHUTDOWN_TIMEOUT = 10  # seconds to wait for a running import on shutdown
SQLITE_PATH = "catalog.db"  # SQLite fallback when DATABASE_URL is unset

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


@dataclass
class Settings:
    """Runtime configuration for the web app and the catalog import."""
    database_url: Optional[str] = None
    sqlite_path: str = SQLITE_PATH
    catalog_url: str = CATALOG_URL
    import_limit: int = IMPORT_LIMIT
    description_max_length: int = DESCRIPTION_MAX_LENGTH
    max_response_bytes: int = MAX_RESPONSE_BYTES
    request_timeout: float = REQUEST_TIMEOUT
    shutdown_timeout: float = SHUTDOWN_TIMEOUT
    import_on_startup: bool = True
    log_level: str = "INFO"
    db_pool_min: int = 1
    db_pool_max: int = 5


def load_settings() -> Settings:
    """Build Settings from environment variables."""
    return Settings(
        database_url=os.getenv("DATABASE_URL") or None,
        sqlite_path=os.getenv("SQLITE_PATH", SQLITE_PATH),
        catalog_url=os.getenv("CATALOG_URL", CATALOG_URL),
        import_limit=_env_int("IMPORT_LIMIT", IMPORT_LIMIT),
        description_max_length=_env_int("DESCRIPTION_MAX_LENGTH", DESCRIPTION_MAX_LENGTH),
        max_response_bytes=_env_int("MAX_RESPONSE_BYTES", MAX_RESPONSE_BYTES),
        request_timeout=_env_float("REQUEST_TIMEOUT", REQUEST_TIMEOUT),
        shutdown_timeout=_env_float("SHUTDOWN_TIMEOUT", SHUTDOWN_TIMEOUT),
        import_on_startup=_env_bool("IMPORT_ON_STARTUP", True),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        db_pool_min=_env_int("DB_POOL_MIN", 1),
        db_pool_max=_env_int("DB_POOL_MAX", 5),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
