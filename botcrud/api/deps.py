"""
FastAPI dependencies: the process-wide store lives on ``app.state`` and is injected per request.
"""

from fastapi import Depends, Request

from ..core.bots import BotsModule
from ..core.datastore import CollectionStore
from ..core.logs import LogsModule
from ..core.workers import WorkersModule


def get_store(request: Request) -> CollectionStore:
    return request.app.state.store


def get_bots(store: CollectionStore = Depends(get_store)) -> BotsModule:
    return BotsModule(store)


def get_workers(store: CollectionStore = Depends(get_store)) -> WorkersModule:
    return WorkersModule(store)


def get_logs(store: CollectionStore = Depends(get_store)) -> LogsModule:
    return LogsModule(store)


def success(message: str, data) -> dict:
    """Standard success envelope."""
    return {"statusCode": 200, "message": message, "data": data}
