# taskboard/routers/health.py
import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request

from taskboard.services.api_client import ApiClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


def get_api(request: Request) -> ApiClient:
    return request.app.state.api


@router.get("")
def health_app():
    return {"ok": True}


@router.get("/api")
async def health_api(api: ApiClient = Depends(get_api)):
    """
    Backend reachability check.
    - OK: {"ok": true, "base_url": "..."}
    - backend down or answering non-2xx: 500
    """
    try:
        await api.get("/tasks")
    except httpx.HTTPError as e:
        logger.warning("task backend health check failed: %s", e)
        raise HTTPException(status_code=500, detail="Task backend unreachable")
    return {"ok": True, "base_url": api.base_url}
