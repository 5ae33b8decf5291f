"""
Top-level router for version 1 of the API.

Aggregates the domain routers under a single router that the
application mounts at ``settings.api_prefix``.
"""

from fastapi import APIRouter

from .endpoints import addresses, customers, info

router = APIRouter()

router.include_router(customers.router, prefix="/customers", tags=["customers"])
# The addresses router defines its own full paths (``/customers/{id}/addresses``
# and ``/addresses/{id}``), so it is included without a prefix.
router.include_router(addresses.router, tags=["addresses"])
router.include_router(info.router, prefix="/info", tags=["info"])
