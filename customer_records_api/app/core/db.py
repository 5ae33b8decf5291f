"""
SQLite database integration, connection pooling and startup schema.

The module provides a ``ConnectionPool`` that hands out one connection
per service call and takes it back afterwards, the ``init_db``
function that applies the create-if-absent schema on application
start, and the ``get_pool`` dependency used by FastAPI routes.  The
pool is created by the application factory and injected into services
explicitly; there is no module-level connection state.

Applied schema versions are stored in the ``migrations`` table and
new versions are executed in order.
"""

import logging
import os
import queue
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from fastapi import Request

from .config import Settings
from .errors import StoreUnavailable, translate_store_error


# SQLite has no UUID type; this expression produces a random version 4
# UUID string so identifiers are assigned by the store itself.
UUID_DEFAULT = (
    "(lower(hex(randomblob(4))) || '-' || lower(hex(randomblob(2))) || '-4' || "
    "substr(lower(hex(randomblob(2))), 2) || '-' || "
    "substr('89ab', 1 + (abs(random()) % 4), 1) || "
    "substr(lower(hex(randomblob(2))), 2) || '-' || lower(hex(randomblob(6))))"
)

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: customers and their addresses
    (
        1,
        f"""
        CREATE TABLE IF NOT EXISTS customers (
            customer_id TEXT PRIMARY KEY DEFAULT {UUID_DEFAULT},
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            phone_number TEXT NOT NULL,
            city TEXT NOT NULL,
            state TEXT NOT NULL,
            pin_code TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS addresses (
            address_id TEXT PRIMARY KEY DEFAULT {UUID_DEFAULT},
            customer_id TEXT NOT NULL,
            address_line TEXT NOT NULL,
            city TEXT NOT NULL,
            state TEXT NOT NULL,
            pin_code TEXT NOT NULL,
            FOREIGN KEY(customer_id) REFERENCES customers(customer_id)
        );
        """,
    ),
    # Migration 2: indexes for address lookups and customer search
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_addresses_customer_id ON addresses(customer_id);
        CREATE INDEX IF NOT EXISTS idx_customers_city ON customers(city);
        CREATE INDEX IF NOT EXISTS idx_customers_state ON customers(state);
        CREATE INDEX IF NOT EXISTS idx_customers_pin_code ON customers(pin_code);
        """,
    ),
]


def get_database_path(settings: Settings) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths and ``:memory:`` are used as is; relative paths are
    resolved against the project root.
    """
    db_url = settings.database_url
    if db_url == ":memory:" or os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


class ConnectionPool:
    """A small pool of reusable SQLite connections.

    Use ``with pool.connection() as conn:`` to borrow a connection.  The
    transaction is committed when the block exits normally and rolled
    back otherwise; the connection then goes back to the pool.  Any
    ``sqlite3`` error raised inside the block is re-raised as a
    ``RecordServiceError`` subclass.

    Note that every connection to ``:memory:`` opens a separate empty
    database, so in-memory pools are only useful with ``max_size=1``.
    """

    def __init__(self, database_path: str, max_size: int = 5, timeout: float = 5.0) -> None:
        self.database_path = database_path
        self.max_size = max_size
        self.timeout = timeout
        self._idle: "queue.LifoQueue[sqlite3.Connection]" = queue.LifoQueue(maxsize=max_size)
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConnectionPool":
        return cls(
            get_database_path(settings),
            max_size=settings.db_pool_size,
            timeout=settings.db_timeout,
        )

    def _connect(self) -> sqlite3.Connection:
        logger = logging.getLogger(__name__)
        try:
            conn = sqlite3.connect(
                self.database_path,
                timeout=self.timeout,
                check_same_thread=False,
            )
        except sqlite3.Error as exc:
            logger.error("Cannot open database %s: %s", self.database_path, exc)
            raise StoreUnavailable("The record store is unavailable", detail=str(exc)) from exc
        try:
            # Foreign keys are off by default in SQLite and must be enabled
            # per connection, otherwise REFERENCES clauses are ignored.
            conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as exc:
            conn.close()
            logger.error("Cannot configure connection to %s: %s", self.database_path, exc)
            raise StoreUnavailable("The record store is unavailable", detail=str(exc)) from exc
        conn.row_factory = sqlite3.Row
        logger.debug("Opened connection to %s", self.database_path)
        return conn

    def _acquire(self) -> sqlite3.Connection:
        if self._closed:
            raise StoreUnavailable("The record store is unavailable", detail="pool is closed")
        try:
            return self._idle.get_nowait()
        except queue.Empty:
            return self._connect()

    def _release(self, conn: sqlite3.Connection) -> None:
        if self._closed:
            conn.close()
            return
        try:
            self._idle.put_nowait(conn)
        except queue.Full:
            conn.close()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        conn = self._acquire()
        broken = False
        try:
            yield conn
            conn.commit()
        except (sqlite3.Error, UnicodeEncodeError, OverflowError) as exc:
            # Encoding and overflow errors come from binding values the
            # store cannot represent.
            error = translate_store_error(exc)
            broken = isinstance(error, StoreUnavailable)
            try:
                conn.rollback()
            except sqlite3.Error:
                broken = True
            raise error from exc
        except BaseException:
            conn.rollback()
            raise
        finally:
            if broken:
                conn.close()
            else:
                self._release(conn)

    def close(self) -> None:
        """Close every idle connection and refuse further acquisitions."""
        self._closed = True
        while True:
            try:
                conn = self._idle.get_nowait()
            except queue.Empty:
                break
            conn.close()


def init_db(pool: ConnectionPool) -> None:
    """Create the tables if they are absent and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version and runs every newer entry of ``MIGRATIONS``.
    Running it against an up-to-date database is a no-op.
    """
    logger = logging.getLogger(__name__)
    with pool.connection() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                current_version = version
                logger.info("Applied schema migration %s", version)


def get_pool(request: Request) -> ConnectionPool:
    """FastAPI dependency returning the pool owned by the application."""
    return request.app.state.pool
