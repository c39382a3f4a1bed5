"""
Resource services for the BotCRUD API client.
"""

import base64
import json
from typing import Any, Dict, List, Optional

from .http import ApiClientError, HttpClient


def encode_filter(filter: Optional[Dict[str, Any]]) -> Optional[str]:
    """Base64-encode a JSON filter for safe transport in a query string."""
    if not filter:
        return None
    return base64.b64encode(json.dumps(filter).encode("utf-8")).decode("ascii")


def _list_params(filter: Optional[Dict[str, Any]] = None, page: Optional[int] = None,
                 per_page: Optional[int] = None, **extra) -> Dict[str, Any]:
    params = {"filter": encode_filter(filter), "page": page, "perPage": per_page}
    params.update(extra)
    return params


class BotsService:
    base_path = "/api/bots"

    def __init__(self, http: HttpClient):
        self.http = http

    def create(self, name: str, description: Optional[str] = None, status: Optional[str] = None) -> Dict[str, Any]:
        payload = {"name": name}
        if description is not None:
            payload["description"] = description
        if status is not None:
            payload["status"] = status
        return self.http.post(self.base_path, payload)

    def list(self, status: Optional[str] = None, filter: Optional[Dict[str, Any]] = None,
             page: Optional[int] = None, per_page: Optional[int] = None) -> Dict[str, Any]:
        return self.http.get(self.base_path, _list_params(filter, page, per_page, status=status))

    def get(self, bot_id: str) -> Dict[str, Any]:
        return self.http.get(f"{self.base_path}/{bot_id}")

    def update(self, bot_id: str, **fields) -> Dict[str, Any]:
        return self.http.put(f"{self.base_path}/{bot_id}", fields)

    def delete(self, bot_id: str) -> Dict[str, Any]:
        return self.http.delete(f"{self.base_path}/{bot_id}")

    def get_by_status(self, status: str, page: Optional[int] = None, per_page: Optional[int] = None) -> Dict[str, Any]:
        return self.list(status=status, page=page, per_page=per_page)

    def get_workers(self, bot_id: str, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return self.http.get(f"{self.base_path}/{bot_id}/workers", {"filter": encode_filter(filter)})

    def get_logs(self, bot_id: str, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return self.http.get(f"{self.base_path}/{bot_id}/logs", {"filter": encode_filter(filter)})


class WorkersService:
    base_path = "/api/workers"

    def __init__(self, http: HttpClient):
        self.http = http

    def create(self, name: str, bot: str, description: Optional[str] = None) -> Dict[str, Any]:
        payload = {"name": name, "bot": bot}
        if description is not None:
            payload["description"] = description
        return self.http.post(self.base_path, payload)

    def list(self, bot: Optional[str] = None, filter: Optional[Dict[str, Any]] = None,
             page: Optional[int] = None, per_page: Optional[int] = None) -> Dict[str, Any]:
        return self.http.get(self.base_path, _list_params(filter, page, per_page, bot=bot))

    def get(self, worker_id: str) -> Dict[str, Any]:
        return self.http.get(f"{self.base_path}/{worker_id}")

    def update(self, worker_id: str, **fields) -> Dict[str, Any]:
        return self.http.put(f"{self.base_path}/{worker_id}", fields)

    def delete(self, worker_id: str) -> Dict[str, Any]:
        return self.http.delete(f"{self.base_path}/{worker_id}")

    def get_by_bot(self, bot_id: str, page: Optional[int] = None, per_page: Optional[int] = None) -> Dict[str, Any]:
        return self.list(bot=bot_id, page=page, per_page=per_page)

    def reassign(self, worker_id: str, bot_id: str) -> Dict[str, Any]:
        """Move a worker to another bot."""
        return self.update(worker_id, bot=bot_id)

    def get_logs(self, worker_id: str, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return self.http.get(f"{self.base_path}/{worker_id}/logs", {"filter": encode_filter(filter)})


class LogsService:
    base_path = "/api/logs"

    def __init__(self, http: HttpClient):
        self.http = http

    def create(self, message: str, bot: str, worker: str) -> Dict[str, Any]:
        return self.http.post(self.base_path, {"message": message, "bot": bot, "worker": worker})

    def list(self, bot: Optional[str] = None, worker: Optional[str] = None, filter: Optional[Dict[str, Any]] = None,
             page: Optional[int] = None, per_page: Optional[int] = None) -> Dict[str, Any]:
        return self.http.get(self.base_path, _list_params(filter, page, per_page, bot=bot, worker=worker))

    def get(self, log_id: str) -> Dict[str, Any]:
        return self.http.get(f"{self.base_path}/{log_id}")

    def update(self, log_id: str, message: str) -> Dict[str, Any]:
        return self.http.put(f"{self.base_path}/{log_id}", {"message": message})

    def delete(self, log_id: str) -> Dict[str, Any]:
        return self.http.delete(f"{self.base_path}/{log_id}")

    def get_by_bot(self, bot_id: str, page: Optional[int] = None, per_page: Optional[int] = None) -> Dict[str, Any]:
        return self.list(bot=bot_id, page=page, per_page=per_page)

    def get_by_worker(self, worker_id: str, page: Optional[int] = None, per_page: Optional[int] = None) -> Dict[str, Any]:
        return self.list(worker=worker_id, page=page, per_page=per_page)

    def get_by_bot_and_worker(self, bot_id: str, worker_id: str, page: Optional[int] = None,
                              per_page: Optional[int] = None) -> Dict[str, Any]:
        return self.list(bot=bot_id, worker=worker_id, page=page, per_page=per_page)

    def log(self, message: str, bot_id: str, worker_id: str) -> Dict[str, Any]:
        """Shorthand for writing one log line."""
        return self.create(message=message, bot=bot_id, worker=worker_id)


class HealthService:
    def __init__(self, http: HttpClient):
        self.http = http

    def check(self) -> Dict[str, Any]:
        return self.http.get("/health")

    def detailed(self) -> Dict[str, Any]:
        return self.http.get("/health/detailed")

    def is_healthy(self) -> bool:
        try:
            return self.check().get("status") == "healthy"
        except ApiClientError:
            return False

    def get_stats(self) -> Dict[str, int]:
        return self.detailed()["stats"]

    def get_memory_usage(self) -> Dict[str, int]:
        return self.detailed()["memory"]

    def get_uptime(self) -> float:
        return self.detailed()["uptime"]
