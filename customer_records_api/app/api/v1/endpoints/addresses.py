"""
Address endpoints for API v1.

Addresses are read through their customer and updated by their own
ID, so this router defines full paths and is included without a
prefix.
"""

from typing import List

from fastapi import APIRouter, Depends

from customer_records_api.app.core.db import ConnectionPool, get_pool
from customer_records_api.app.schemas.address import AddressRead, AddressUpdate
from customer_records_api.app.services.address_service import AddressService

router = APIRouter()


def get_address_service(pool: ConnectionPool = Depends(get_pool)) -> AddressService:
    return AddressService(pool)


@router.get("/customers/{customer_id}/addresses", response_model=List[AddressRead])
async def list_customer_addresses(
    customer_id: str,
    service: AddressService = Depends(get_address_service),
) -> List[AddressRead]:
    """Return every address of a customer; an empty list when it has none."""
    return await service.list_addresses(customer_id)


@router.put("/addresses/{address_id}", response_model=AddressRead)
async def update_address(
    address_id: str,
    address_in: AddressUpdate,
    service: AddressService = Depends(get_address_service),
) -> AddressRead:
    """Replace line, city, state and pin code of an address."""
    return await service.update_address(address_id, address_in)
