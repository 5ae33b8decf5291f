import pytest
from fastapi.testclient import TestClient

from customer_records_api.app.core.config import Settings
from customer_records_api.app.core.db import ConnectionPool, init_db
from customer_records_api.app.main import create_app
from customer_records_api.app.schemas.customer import CustomerCreate
from customer_records_api.app.services.address_service import AddressService
from customer_records_api.app.services.customer_service import CustomerService


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "records.db")


@pytest.fixture
def pool(db_path):
    pool = ConnectionPool(db_path, max_size=2)
    init_db(pool)
    yield pool
    pool.close()


@pytest.fixture
def customer_service(pool):
    return CustomerService(pool)


@pytest.fixture
def address_service(pool):
    return AddressService(pool)


@pytest.fixture
def client(db_path):
    app = create_app(Settings(database_url=db_path))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def ann_payload():
    return {
        "FirstName": "Ann",
        "LastName": "Lee",
        "PhoneNumber": "555-0100",
        "City": "Reno",
        "State": "NV",
        "PinCode": "89501",
    }


@pytest.fixture
def make_customer():
    """Build a CustomerCreate with defaults that tests override per field."""

    def _make(**overrides):
        fields = {
            "first_name": "Ann",
            "last_name": "Lee",
            "phone_number": "555-0100",
            "city": "Reno",
            "state": "NV",
            "pin_code": "89501",
        }
        fields.update(overrides)
        return CustomerCreate(**fields)

    return _make


@pytest.fixture
def add_address():
    """Insert an address row directly; the API has no endpoint for it."""

    def _add(pool, customer_id, address_line="1 Main St", city="Reno", state="NV", pin_code="89501"):
        with pool.connection() as conn:
            row = conn.execute(
                """
                INSERT INTO addresses (customer_id, address_line, city, state, pin_code)
                VALUES (?1, ?2, ?3, ?4, ?5)
                RETURNING address_id
                """,
                (customer_id, address_line, city, state, pin_code),
            ).fetchall()[0]
        return row["address_id"]

    return _add
