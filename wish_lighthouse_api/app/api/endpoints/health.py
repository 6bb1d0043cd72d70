"""
Health check endpoint.

``GET /health`` reports process uptime and whether the wish store
answers.  It lives outside the ``/api`` prefix so load balancers can
probe it without knowing the API layout.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from wish_lighthouse_api.app.api.deps import get_wish_service
from wish_lighthouse_api.app.services.wish_service import WishService


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", summary="Health check")
async def health(
    request: Request,
    service: WishService = Depends(get_wish_service),
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
    }
    try:
        service.health_check()
    except Exception as e:
        logger.error("Wish store health check failed: %s", e)
        body["status"] = "UNAVAILABLE"
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
    return body
