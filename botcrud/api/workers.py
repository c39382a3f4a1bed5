"""
Worker endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.workers import WorkersModule
from .deps import get_workers, success
from .schemas import ERROR_RESPONSES, ApiResponse, PaginatedResponse, WorkerCreateRequest, WorkerUpdateRequest

router = APIRouter(tags=["workers"], responses=ERROR_RESPONSES)


@router.get("/workers", response_model=PaginatedResponse)
def list_workers(
    bot: Optional[str] = Query(default=None, description="Filter by bot ID"),
    filter: Optional[str] = Query(default=None, description="Base64-encoded JSON equality filter"),
    page: int = Query(default=0, ge=0),
    per_page: int = Query(default=20, ge=1, le=100, alias="perPage"),
    workers: WorkersModule = Depends(get_workers),
):
    data = workers.find_all(bot=bot, filter=filter, page=page, per_page=per_page)
    return success("Records retrieved successfully", data)


@router.get("/workers/{worker_id}", response_model=ApiResponse)
def get_worker(worker_id: str, workers: WorkersModule = Depends(get_workers)):
    return success("Record retrieved successfully", workers.find_by_id(worker_id))


@router.post("/workers", response_model=ApiResponse)
def create_worker(request: WorkerCreateRequest, workers: WorkersModule = Depends(get_workers)):
    data = workers.create(request.model_dump(exclude_unset=True))
    return success("Record created successfully", data)


@router.put("/workers/{worker_id}", response_model=ApiResponse)
def update_worker(worker_id: str, request: WorkerUpdateRequest, workers: WorkersModule = Depends(get_workers)):
    """Update a worker. Setting ``bot`` reassigns it to another bot."""
    data = workers.update_by_id(worker_id, request.model_dump(exclude_unset=True))
    return success("Record updated successfully", data)


@router.delete("/workers/{worker_id}", response_model=ApiResponse)
def delete_worker(worker_id: str, workers: WorkersModule = Depends(get_workers)):
    return success("Record deleted successfully", workers.delete_by_id(worker_id))


@router.get("/workers/{worker_id}/logs", response_model=ApiResponse)
def get_worker_logs(
    worker_id: str,
    filter: Optional[str] = Query(default=None),
    workers: WorkersModule = Depends(get_workers),
):
    return success("Logs retrieved successfully", workers.get_logs(worker_id, filter=filter))


@router.get("/bots/{bot_id}/workers/{worker_id}/logs", response_model=ApiResponse)
def get_bot_worker_logs(
    bot_id: str,
    worker_id: str,
    filter: Optional[str] = Query(default=None),
    workers: WorkersModule = Depends(get_workers),
):
    data = workers.get_logs_for_bot_worker(bot_id, worker_id, filter=filter)
    return success("Logs retrieved successfully", data)
