"""
Logs domain module - business rules for the ``logs`` collection.
Every log references a bot and one of that bot's workers.
"""

from typing import Any, Dict, Optional

from util.logging import logger

from .base import DomainModule
from .errors import BadRequestError
from .schema import Record


class LogsModule(DomainModule):
    collection = "logs"
    entity = "Log"
    filter_fields = ("message", "bot", "worker", "created")
    writable_fields = ("message", "bot", "worker")

    def find_all(self, bot: Optional[str] = None, worker: Optional[str] = None, filter: Any = None,
                 page: Any = 0, per_page: Any = None) -> Dict[str, Any]:
        """Paginated logs, newest first, optionally restricted to a bot and/or worker."""
        filters = self._build_filters(filter)
        if bot:
            filters["bot"] = bot
        if worker:
            filters["worker"] = worker
        return self._list(filters, page, per_page)

    def create(self, payload: Dict[str, Any]) -> Record:
        data = self._clean_payload(payload)
        if not data.get("message"):
            raise self._reject("create", BadRequestError("Message is required"))

        bot_id, worker_id = data.get("bot"), data.get("worker")
        if not bot_id or self.store.find_by_id("bots", bot_id) is None:
            raise self._reject("create", BadRequestError(f"Bot with id '{bot_id}' not found"))

        worker = self.store.find_by_id("workers", worker_id) if worker_id else None
        if worker is None:
            raise self._reject("create", BadRequestError(f"Worker with id '{worker_id}' not found"))
        if worker.get("bot") != bot_id:
            raise self._reject("create", BadRequestError(
                f"Worker '{worker_id}' does not belong to bot '{bot_id}'"
            ))

        log = self.store.create(self.collection, data)
        logger.log_domain_event("log", "created", log["id"], {"bot": bot_id, "worker": worker_id})
        return log

    def update_by_id(self, log_id: str, payload: Dict[str, Any]) -> Record:
        """Only the message of a log can change; its bot and worker are fixed."""
        self._get_or_404(log_id)
        data = {k: v for k, v in self._clean_payload(payload).items() if k == "message"}
        if not data.get("message"):
            raise self._reject("update", BadRequestError("Message is required"))

        updated = self.store.update_by_id(self.collection, log_id, data)
        if updated is None:
            raise self._not_found(log_id)
        logger.log_domain_event("log", "updated", log_id)
        return updated

    def delete_by_id(self, log_id: str) -> Record:
        self._get_or_404(log_id)
        deleted = self.store.delete_by_id(self.collection, log_id)
        if deleted is None:
            raise self._not_found(log_id)
        logger.log_domain_event("log", "deleted", log_id)
        return deleted
