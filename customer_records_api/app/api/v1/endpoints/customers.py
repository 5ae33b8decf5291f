"""
Customer endpoints for API v1.

These routes expose create/read/update/delete for customers plus two
read-only collection queries: exact-match search and the list of
customers owning exactly one address.  The static ``/one-address`` and
``/search`` routes are declared before ``/{customer_id}`` so they are
never captured as an id.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from customer_records_api.app.core.db import ConnectionPool, get_pool
from customer_records_api.app.schemas.customer import (
    CustomerCreate,
    CustomerFilter,
    CustomerRead,
    CustomerSummary,
    CustomerUpdate,
    Message,
)
from customer_records_api.app.services.customer_service import CustomerService

# Largest value SQLite can bind as an integer.
MAX_OFFSET = 2**63 - 1

router = APIRouter()


def get_customer_service(pool: ConnectionPool = Depends(get_pool)) -> CustomerService:
    return CustomerService(pool)


@router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_in: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerRead:
    """Create a customer from its six required fields."""
    return await service.create_customer(customer_in)


@router.get("/one-address", response_model=List[CustomerSummary])
async def list_customers_with_one_address(
    service: CustomerService = Depends(get_customer_service),
) -> List[CustomerSummary]:
    """List customers that have exactly one address on file."""
    return await service.customers_with_one_address()


@router.get("/search", response_model=List[CustomerRead])
async def search_customers(
    city: Optional[str] = Query(None, alias="City"),
    state: Optional[str] = Query(None, alias="State"),
    pin_code: Optional[str] = Query(None, alias="PinCode"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0, le=MAX_OFFSET),
    service: CustomerService = Depends(get_customer_service),
) -> List[CustomerRead]:
    """Search customers by city, state and/or pin code.

    Each supplied parameter must match exactly.  Omitting all of them
    returns every customer; ``limit`` and ``offset`` page through the
    result.
    """
    filters = CustomerFilter(city=city, state=state, pin_code=pin_code)
    return await service.search_customers(filters, limit=limit, offset=offset)


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerRead:
    """Retrieve a customer by ID.  Returns HTTP 404 if it does not exist.

    Not-found and store failures are rendered by the application-wide
    ``RecordServiceError`` handler."""
    return await service.get_customer(customer_id)


@router.put("/{customer_id}", response_model=CustomerRead)
async def update_customer(
    customer_id: str,
    customer_in: CustomerUpdate,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerRead:
    """Update first name, last name and phone number of a customer."""
    return await service.update_customer(customer_id, customer_in)


@router.delete("/{customer_id}", response_model=Message)
async def delete_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
) -> Message:
    """Delete a customer.

    Answers HTTP 409 while the customer still has addresses; they are
    not deleted along with it.
    """
    await service.delete_customer(customer_id)
    return Message(message="Customer deleted successfully")
