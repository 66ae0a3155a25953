"""
Health check endpoint.
"""

import time
from typing import Any, Dict

from fastapi import APIRouter, Request

from .. import __version__
from ..core.logging import get_logger

logger = get_logger(__name__)

health_router = APIRouter(prefix="/health", tags=["health"])

_started_at = time.time()


@health_router.get("")
async def health_check(request: Request) -> Dict[str, Any]:
    """Liveness plus a ping of the document store."""
    store_ok = await request.app.state.container.store.ping()
    if not store_ok:
        logger.warning("Health check: document store unreachable")
    return {
        "status": "healthy" if store_ok else "degraded",
        "version": __version__,
        "uptime_seconds": time.time() - _started_at,
        "store": "up" if store_ok else "down",
    }
