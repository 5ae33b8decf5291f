"""
Service layer for customers.

``CustomerService`` implements create/read/update/delete for
customers, the exact-match search over city, state and pin code, and
the aggregate listing customers that own exactly one address.  The
service receives its ``ConnectionPool`` at construction time and
borrows one connection per call.

Every statement is parameterized.  Values always travel as bound
parameters using SQLite's numbered ``?N`` placeholders; the only text
ever spliced into a query comes from the fixed column whitelist below.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional, Tuple, Union

from customer_records_api.app.core.db import ConnectionPool
from customer_records_api.app.core.errors import ConstraintViolation, NotFound, ValidationError
from customer_records_api.app.schemas.customer import (
    CustomerCreate,
    CustomerFilter,
    CustomerRead,
    CustomerSummary,
    CustomerUpdate,
)

CUSTOMER_COLUMNS = "customer_id, first_name, last_name, phone_number, city, state, pin_code"

# Searchable fields in placeholder order: (filter attribute, column).
SEARCH_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("city", "city"),
    ("state", "state"),
    ("pin_code", "pin_code"),
)


def build_customer_search(
    filters: CustomerFilter,
    limit: Optional[int] = None,
    offset: int = 0,
) -> Tuple[str, List[Union[str, int]]]:
    """Compose the search query and its bound parameters.

    Starts from an unconditional ``WHERE 1=1`` and appends one
    ``AND <column> = ?N`` per supplied filter, where ``N`` is the
    position of the value in the returned parameter list.  Empty or
    missing filters add nothing.  Pagination, when requested, is bound
    the same way (``LIMIT -1`` means "no limit" in SQLite).
    """
    query = f"SELECT {CUSTOMER_COLUMNS} FROM customers WHERE 1=1"
    params: List[Union[str, int]] = []
    for field, column in SEARCH_COLUMNS:
        value = getattr(filters, field)
        if value:
            params.append(value)
            query += f" AND {column} = ?{len(params)}"
    query += " ORDER BY rowid"
    if limit is not None or offset:
        params.append(limit if limit is not None else -1)
        query += f" LIMIT ?{len(params)}"
        params.append(offset)
        query += f" OFFSET ?{len(params)}"
    return query, params


class CustomerService:
    """Customer operations backed by an injected connection pool."""

    def __init__(self, pool: ConnectionPool) -> None:
        self.pool = pool

    async def create_customer(self, data: CustomerCreate) -> CustomerRead:
        """Insert a customer and return the stored row.

        The store assigns ``customer_id``; the row, identifier included,
        is read back by the same ``INSERT ... RETURNING`` statement.
        """
        logger = logging.getLogger(__name__)
        self._require_fields(data)
        with self.pool.connection() as conn:
            row = conn.execute(
                f"""
                INSERT INTO customers (first_name, last_name, phone_number, city, state, pin_code)
                VALUES (?1, ?2, ?3, ?4, ?5, ?6)
                RETURNING {CUSTOMER_COLUMNS}
                """,
                (
                    data.first_name,
                    data.last_name,
                    data.phone_number,
                    data.city,
                    data.state,
                    data.pin_code,
                ),
            ).fetchall()[0]
        logger.info("Created customer %s", row["customer_id"])
        return self._row_to_customer(row)

    async def get_customer(self, customer_id: str) -> CustomerRead:
        """Return the customer with ``customer_id`` or raise ``NotFound``."""
        with self.pool.connection() as conn:
            row = conn.execute(
                f"SELECT {CUSTOMER_COLUMNS} FROM customers WHERE customer_id = ?1",
                (customer_id,),
            ).fetchone()
        if row is None:
            raise NotFound("Customer not found", detail=customer_id)
        return self._row_to_customer(row)

    async def update_customer(self, customer_id: str, data: CustomerUpdate) -> CustomerRead:
        """Replace the name and phone number of a customer.

        City, state and pin code are fixed at creation.  Raises
        ``NotFound`` when no customer has ``customer_id``.
        """
        logger = logging.getLogger(__name__)
        with self.pool.connection() as conn:
            rows = conn.execute(
                f"""
                UPDATE customers
                SET first_name = ?1, last_name = ?2, phone_number = ?3
                WHERE customer_id = ?4
                RETURNING {CUSTOMER_COLUMNS}
                """,
                (data.first_name, data.last_name, data.phone_number, customer_id),
            ).fetchall()
        if not rows:
            raise NotFound("Customer not found", detail=customer_id)
        logger.info("Updated customer %s", customer_id)
        return self._row_to_customer(rows[0])

    async def delete_customer(self, customer_id: str) -> None:
        """Delete a customer.

        Addresses are never removed along with their customer: while any
        address references ``customer_id`` the store refuses the delete
        and ``ConstraintViolation`` is raised.  Raises ``NotFound`` when
        no customer has ``customer_id``.
        """
        logger = logging.getLogger(__name__)
        try:
            with self.pool.connection() as conn:
                deleted = conn.execute(
                    "DELETE FROM customers WHERE customer_id = ?1",
                    (customer_id,),
                ).rowcount
        except ConstraintViolation as exc:
            logger.warning("Refused to delete customer %s: %s", customer_id, exc.detail)
            raise ConstraintViolation(
                "Customer still has addresses and cannot be deleted",
                detail=exc.detail,
            ) from exc
        if not deleted:
            raise NotFound("Customer not found", detail=customer_id)
        logger.info("Deleted customer %s", customer_id)

    async def search_customers(
        self,
        filters: CustomerFilter,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[CustomerRead]:
        """Return customers matching every supplied filter exactly.

        With no filters every customer is returned, in creation order.
        """
        query, params = build_customer_search(filters, limit=limit, offset=offset)
        with self.pool.connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_customer(row) for row in rows]

    async def customers_with_one_address(self) -> List[CustomerSummary]:
        """Return the customers that own exactly one address.

        A single grouped query counts addresses per customer, so customers
        without addresses (count 0) and with several are both left out.
        """
        with self.pool.connection() as conn:
            rows = conn.execute(
                """
                SELECT c.customer_id, c.first_name, c.last_name
                FROM customers c
                LEFT JOIN addresses a ON c.customer_id = a.customer_id
                GROUP BY c.customer_id, c.first_name, c.last_name
                HAVING COUNT(a.address_id) = ?1
                ORDER BY MIN(c.rowid)
                """,
                (1,),
            ).fetchall()
        return [
            CustomerSummary(
                customer_id=row["customer_id"],
                first_name=row["first_name"],
                last_name=row["last_name"],
            )
            for row in rows
        ]

    @staticmethod
    def _require_fields(data: CustomerCreate) -> None:
        for name, field in CustomerCreate.model_fields.items():
            value = getattr(data, name, None)
            if value is None or not str(value).strip():
                raise ValidationError(f"{field.alias} is required")

    @staticmethod
    def _row_to_customer(row: sqlite3.Row) -> CustomerRead:
        """Convert a database row to a CustomerRead schema instance."""
        return CustomerRead(
            customer_id=row["customer_id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            phone_number=row["phone_number"],
            city=row["city"],
            state=row["state"],
            pin_code=row["pin_code"],
        )
