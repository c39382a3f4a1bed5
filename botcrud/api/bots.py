"""
Bot endpoints: CRUD plus the bot's workers and logs.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.bots import BotsModule
from ..core.schema import BotStatus
from .deps import get_bots, success
from .schemas import ERROR_RESPONSES, ApiResponse, PaginatedResponse, BotCreateRequest, BotUpdateRequest

router = APIRouter(tags=["bots"], responses=ERROR_RESPONSES)


@router.get("/bots", response_model=PaginatedResponse)
def list_bots(
    status: Optional[BotStatus] = Query(default=None, description="Filter by status"),
    filter: Optional[str] = Query(default=None, description="Base64-encoded JSON equality filter"),
    page: int = Query(default=0, ge=0, description="Page number (0-based)"),
    per_page: int = Query(default=20, ge=1, le=100, alias="perPage", description="Items per page"),
    bots: BotsModule = Depends(get_bots),
):
    """List bots, newest first. Can be filtered by status."""
    data = bots.find_all(status=status.value if status else None, filter=filter, page=page, per_page=per_page)
    return success("Records retrieved successfully", data)


@router.get("/bots/{bot_id}", response_model=ApiResponse)
def get_bot(bot_id: str, bots: BotsModule = Depends(get_bots)):
    return success("Record retrieved successfully", bots.find_by_id(bot_id))


@router.post("/bots", response_model=ApiResponse)
def create_bot(request: BotCreateRequest, bots: BotsModule = Depends(get_bots)):
    data = bots.create(request.model_dump(mode="json", exclude_unset=True))
    return success("Record created successfully", data)


@router.put("/bots/{bot_id}", response_model=ApiResponse)
def update_bot(bot_id: str, request: BotUpdateRequest, bots: BotsModule = Depends(get_bots)):
    data = bots.update_by_id(bot_id, request.model_dump(mode="json", exclude_unset=True))
    return success("Record updated successfully", data)


@router.delete("/bots/{bot_id}", response_model=ApiResponse)
def delete_bot(bot_id: str, bots: BotsModule = Depends(get_bots)):
    """Delete a bot. Refused while the bot still has workers."""
    return success("Record deleted successfully", bots.delete_by_id(bot_id))


@router.get("/bots/{bot_id}/workers", response_model=ApiResponse)
def get_bot_workers(
    bot_id: str,
    filter: Optional[str] = Query(default=None),
    bots: BotsModule = Depends(get_bots),
):
    return success("Workers retrieved successfully", bots.get_workers(bot_id, filter=filter))


@router.get("/bots/{bot_id}/logs", response_model=ApiResponse)
def get_bot_logs(
    bot_id: str,
    filter: Optional[str] = Query(default=None),
    bots: BotsModule = Depends(get_bots),
):
    return success("Logs retrieved successfully", bots.get_logs(bot_id, filter=filter))
