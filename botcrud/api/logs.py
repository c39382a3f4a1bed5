"""
Log endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.logs import LogsModule
from .deps import get_logs, success
from .schemas import ERROR_RESPONSES, ApiResponse, PaginatedResponse, LogCreateRequest, LogUpdateRequest

router = APIRouter(tags=["logs"], responses=ERROR_RESPONSES)


@router.get("/logs", response_model=PaginatedResponse)
def list_logs(
    bot: Optional[str] = Query(default=None, description="Filter by bot ID"),
    worker: Optional[str] = Query(default=None, description="Filter by worker ID"),
    filter: Optional[str] = Query(default=None, description="Base64-encoded JSON equality filter"),
    page: int = Query(default=0, ge=0),
    per_page: int = Query(default=20, ge=1, le=100, alias="perPage"),
    logs: LogsModule = Depends(get_logs),
):
    data = logs.find_all(bot=bot, worker=worker, filter=filter, page=page, per_page=per_page)
    return success("Records retrieved successfully", data)


@router.get("/logs/{log_id}", response_model=ApiResponse)
def get_log(log_id: str, logs: LogsModule = Depends(get_logs)):
    return success("Record retrieved successfully", logs.find_by_id(log_id))


@router.post("/logs", response_model=ApiResponse)
def create_log(request: LogCreateRequest, logs: LogsModule = Depends(get_logs)):
    return success("Record created successfully", logs.create(request.model_dump()))


@router.put("/logs/{log_id}", response_model=ApiResponse)
def update_log(log_id: str, request: LogUpdateRequest, logs: LogsModule = Depends(get_logs)):
    return success("Record updated successfully", logs.update_by_id(log_id, request.model_dump()))


@router.delete("/logs/{log_id}", response_model=ApiResponse)
def delete_log(log_id: str, logs: LogsModule = Depends(get_logs)):
    return success("Record deleted successfully", logs.delete_by_id(log_id))
