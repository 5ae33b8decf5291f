"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables so the service needs no settings library.
Defaults are provided for all fields; override them via environment
variables in a real deployment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Customer Records API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database file.  A relative path is resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "customer_records.db")

    # Number of idle connections the pool keeps around for reuse, and the
    # number of seconds a connection waits on a locked database.
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
    db_timeout: float = float(os.getenv("DB_TIMEOUT", "5.0"))

    # Prefix under which the v1 routes are mounted.  Empty by default so
    # the public paths are ``/customers`` and ``/addresses``.
    api_prefix: str = os.getenv("API_PREFIX", "")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
