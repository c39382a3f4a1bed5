"""
Health endpoints: liveness plus a detailed view with collection counts and process memory.
"""

import time
from datetime import datetime, timezone

import psutil
from fastapi import APIRouter, Depends, Request

from ..core import config
from ..core.datastore import CollectionStore
from .deps import get_store, success
from .schemas import ApiResponse, DetailedHealthData, HealthData

router = APIRouter(tags=["health"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _memory_usage() -> dict:
    info = psutil.Process().memory_info()
    return {"rss": info.rss, "vms": info.vms}


@router.get("/health", response_model=ApiResponse)
def health_check_endpoint():
    """Check service health."""
    data = HealthData(status="healthy", timestamp=_timestamp(), service=config.get_service_name())
    return success("OK", data.model_dump())


@router.get("/health/detailed", response_model=ApiResponse)
def detailed_health_endpoint(request: Request, store: CollectionStore = Depends(get_store)):
    """Health status with per-collection counts, uptime and memory usage."""
    started_at = getattr(request.app.state, "started_at", time.monotonic())
    data = DetailedHealthData(
        status="healthy",
        timestamp=_timestamp(),
        service=config.get_service_name(),
        environment=config.get_environment(),
        uptime=round(time.monotonic() - started_at, 3),
        memory=_memory_usage(),
        stats={name: store.count(name) for name in store.collections},
    )
    return success("OK", data.model_dump())
