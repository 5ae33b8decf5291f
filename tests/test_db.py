import sqlite3

import pytest

from customer_records_api.app.core import db
from customer_records_api.app.core.config import Settings
from customer_records_api.app.core.db import MIGRATIONS, ConnectionPool, get_database_path, init_db
from customer_records_api.app.core.errors import (
    ConstraintViolation,
    RecordServiceError,
    StoreUnavailable,
    ValidationError,
    translate_store_error,
)


def test_init_db_is_idempotent(pool):
    init_db(pool)
    with pool.connection() as conn:
        versions = [row["version"] for row in conn.execute("SELECT version FROM migrations ORDER BY version")]
        tables = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
    assert versions == [version for version, _ in MIGRATIONS]
    assert {"customers", "addresses"} <= tables


def test_connections_are_reused(pool):
    with pool.connection() as first:
        pass
    with pool.connection() as second:
        pass
    assert first is second


def test_foreign_keys_are_enforced(pool):
    with pool.connection() as conn:
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1


def test_block_error_rolls_back(pool):
    with pytest.raises(RuntimeError):
        with pool.connection() as conn:
            conn.execute(
                "INSERT INTO customers (first_name, last_name, phone_number, city, state, pin_code) "
                "VALUES (?1, ?2, ?3, ?4, ?5, ?6)",
                ("A", "B", "C", "D", "E", "F"),
            )
            raise RuntimeError("boom")
    with pool.connection() as conn:
        assert conn.execute("SELECT COUNT(*) FROM customers").fetchone()[0] == 0


def test_not_null_failure_becomes_validation_error(pool):
    with pytest.raises(ValidationError):
        with pool.connection() as conn:
            conn.execute("INSERT INTO customers (first_name) VALUES (?1)", ("Ann",))


def test_missing_directory_is_store_unavailable(tmp_path):
    pool = ConnectionPool(str(tmp_path / "missing" / "records.db"))
    with pytest.raises(StoreUnavailable):
        with pool.connection():
            pass


def test_closed_pool_is_store_unavailable(pool):
    pool.close()
    with pytest.raises(StoreUnavailable):
        with pool.connection():
            pass


def test_translate_store_error():
    assert isinstance(
        translate_store_error(sqlite3.IntegrityError("FOREIGN KEY constraint failed")),
        ConstraintViolation,
    )
    assert isinstance(
        translate_store_error(sqlite3.IntegrityError("UNIQUE constraint failed: customers.customer_id")),
        ConstraintViolation,
    )
    assert isinstance(
        translate_store_error(sqlite3.IntegrityError("NOT NULL constraint failed: customers.city")),
        ValidationError,
    )
    assert isinstance(translate_store_error(sqlite3.OperationalError("database is locked")), StoreUnavailable)
    error = translate_store_error(sqlite3.DatabaseError("file is not a database"))
    assert type(error) is RecordServiceError
    assert error.detail == "file is not a database"


def test_database_path_resolution(tmp_path):
    absolute = str(tmp_path / "x.db")
    assert get_database_path(Settings(database_url=absolute)) == absolute
    assert get_database_path(Settings(database_url=":memory:")) == ":memory:"
    assert get_database_path(Settings(database_url="relative.db")).endswith("relative.db")


def test_unencodable_text_becomes_validation_error(pool):
    with pytest.raises(ValidationError) as exc_info:
        with pool.connection() as conn:
            conn.execute("SELECT ?1", ("\ud800",))
    assert exc_info.value.status_code == 422


def test_oversized_integer_becomes_validation_error(pool):
    with pytest.raises(ValidationError):
        with pool.connection() as conn:
            conn.execute("SELECT ?1", (2**70,))
    # the connection is still usable afterwards
    with pool.connection() as conn:
        assert conn.execute("SELECT 1").fetchone()[0] == 1


def test_failed_pragma_closes_connection(tmp_path, monkeypatch):
    opened = []

    class FailingConnection:
        closed = False

        def execute(self, sql):
            raise sqlite3.OperationalError("disk I/O error")

        def close(self):
            self.closed = True

    def fake_connect(*args, **kwargs):
        conn = FailingConnection()
        opened.append(conn)
        return conn

    monkeypatch.setattr(db.sqlite3, "connect", fake_connect)
    pool = ConnectionPool(str(tmp_path / "records.db"))
    with pytest.raises(StoreUnavailable):
        with pool.connection():
            pass
    assert len(opened) == 1
    assert opened[0].closed


def test_binding_errors_translate_to_validation_error():
    assert isinstance(translate_store_error(OverflowError("Python int too large")), ValidationError)
    encode_error = UnicodeEncodeError("utf-8", "\ud800", 0, 1, "surrogates not allowed")
    assert isinstance(translate_store_error(encode_error), ValidationError)
    assert ValidationError.status_code == 422
