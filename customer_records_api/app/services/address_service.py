"""
Service layer for customer addresses.

Addresses are listed per customer and updated by their own id.  There
is no create or delete operation: address rows are provisioned outside
this API, and the owning customer of an address never changes.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List

from customer_records_api.app.core.db import ConnectionPool
from customer_records_api.app.core.errors import NotFound
from customer_records_api.app.schemas.address import AddressRead, AddressUpdate

ADDRESS_COLUMNS = "address_id, customer_id, address_line, city, state, pin_code"


class AddressService:
    """Address operations backed by an injected connection pool."""

    def __init__(self, pool: ConnectionPool) -> None:
        self.pool = pool

    async def list_addresses(self, customer_id: str) -> List[AddressRead]:
        """Return the addresses of a customer in insertion order.

        An unknown customer and a customer without addresses both yield
        an empty list.
        """
        with self.pool.connection() as conn:
            rows = conn.execute(
                f"SELECT {ADDRESS_COLUMNS} FROM addresses WHERE customer_id = ?1 ORDER BY rowid",
                (customer_id,),
            ).fetchall()
        return [self._row_to_address(row) for row in rows]

    async def update_address(self, address_id: str, data: AddressUpdate) -> AddressRead:
        """Replace line, city, state and pin code of an address.

        Raises ``NotFound`` when no address has ``address_id``.
        """
        logger = logging.getLogger(__name__)
        with self.pool.connection() as conn:
            rows = conn.execute(
                f"""
                UPDATE addresses
                SET address_line = ?1, city = ?2, state = ?3, pin_code = ?4
                WHERE address_id = ?5
                RETURNING {ADDRESS_COLUMNS}
                """,
                (data.address_line, data.city, data.state, data.pin_code, address_id),
            ).fetchall()
        if not rows:
            raise NotFound("Address not found", detail=address_id)
        logger.info("Updated address %s", address_id)
        return self._row_to_address(rows[0])

    @staticmethod
    def _row_to_address(row: sqlite3.Row) -> AddressRead:
        return AddressRead(
            address_id=row["address_id"],
            customer_id=row["customer_id"],
            address_line=row["address_line"],
            city=row["city"],
            state=row["state"],
            pin_code=row["pin_code"],
        )
