"""
Information endpoint for API v1.

Reports the service name and version together with whether the record
store currently answers a trivial query.  Useful as a health check.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from customer_records_api.app.core.db import ConnectionPool, get_pool
from customer_records_api.app.core.errors import RecordServiceError

router = APIRouter()


@router.get("", response_model=Dict[str, Any])
async def get_info(request: Request, pool: ConnectionPool = Depends(get_pool)) -> Dict[str, Any]:
    app_settings = request.app.state.settings
    try:
        with pool.connection() as conn:
            conn.execute("SELECT 1").fetchone()
        store = "ok"
    except RecordServiceError:
        store = "unavailable"
    return {
        "name": app_settings.project_name,
        "version": app_settings.api_version,
        "store": store,
    }
