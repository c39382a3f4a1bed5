"""
Workers domain module - business rules for the ``workers`` collection.
A worker belongs to exactly one bot through its ``bot`` field.
"""

from typing import Any, Dict, List, Optional

from util.logging import logger

from .base import DomainModule
from .errors import BadRequestError, ConflictError, NotFoundError
from .schema import Record


class WorkersModule(DomainModule):
    collection = "workers"
    entity = "Worker"
    filter_fields = ("name", "description", "bot", "created")
    writable_fields = ("name", "description", "bot")

    def _require_bot(self, bot_id: Any) -> Record:
        bot = self.store.find_by_id("bots", bot_id) if bot_id else None
        if bot is None:
            raise BadRequestError(f"Bot with id '{bot_id}' not found")
        return bot

    def _name_taken(self, name: str, bot_id: str, exclude_id: str = None) -> bool:
        return any(
            worker["id"] != exclude_id and self._same_name(worker.get("name"), name)
            for worker in self.store.find_all(self.collection, {"bot": bot_id})
        )

    def find_all(self, bot: Optional[str] = None, filter: Any = None, page: Any = 0, per_page: Any = None) -> Dict[str, Any]:
        """Paginated workers, newest first, optionally restricted to one bot."""
        filters = self._build_filters(filter)
        if bot:
            self._require_bot(bot)
            filters["bot"] = bot
        return self._list(filters, page, per_page)

    def create(self, payload: Dict[str, Any]) -> Record:
        data = self._clean_payload(payload)
        name = data.get("name")
        if not name:
            raise self._reject("create", BadRequestError("Name is required"))

        try:
            self._require_bot(data.get("bot"))
        except BadRequestError as e:
            raise self._reject("create", e)

        if self._name_taken(name, data["bot"]):
            raise self._reject("create", ConflictError(f"Worker with name '{name}' already exists for this bot"))

        data["description"] = data.get("description") or None
        worker = self.store.create(self.collection, data)
        logger.log_domain_event("worker", "created", worker["id"], {"name": worker["name"], "bot": worker["bot"]})
        return worker

    def update_by_id(self, worker_id: str, payload: Dict[str, Any]) -> Record:
        worker = self._get_or_404(worker_id)
        data = self._clean_payload(payload)

        target_bot = worker.get("bot")
        if "bot" in data:
            try:
                self._require_bot(data["bot"])
            except BadRequestError as e:
                raise self._reject("update", e)
            target_bot = data["bot"]

        # A move to another bot re-checks the kept name there
        name = data.get("name", worker.get("name"))
        if "name" in data or target_bot != worker.get("bot"):
            if self._name_taken(name, target_bot, exclude_id=worker_id):
                raise self._reject("update", ConflictError(
                    f"Worker with name '{name}' already exists for this bot"
                ))

        updated = self.store.update_by_id(self.collection, worker_id, data)
        if updated is None:
            raise self._not_found(worker_id)
        logger.log_domain_event("worker", "updated", worker_id, data)
        return updated

    def delete_by_id(self, worker_id: str) -> Record:
        self._get_or_404(worker_id)

        log_count = len(self.store.find_by_foreign_key("logs", "worker", worker_id))
        if log_count > 0:
            raise self._reject("delete", ConflictError(
                f"Cannot delete worker. It has {log_count} associated log(s). Delete logs first."
            ))

        deleted = self.store.delete_by_id(self.collection, worker_id)
        if deleted is None:
            raise self._not_found(worker_id)
        logger.log_domain_event("worker", "deleted", worker_id)
        return deleted

    def get_logs(self, worker_id: str, filter: Any = None) -> List[Record]:
        """Logs written by ``worker_id``, newest first."""
        self._get_or_404(worker_id)
        filters = self._build_filters(filter, ("message", "bot", "created"))
        return self._related("logs", "worker", worker_id, filters)

    def get_logs_for_bot_worker(self, bot_id: str, worker_id: str, filter: Any = None) -> List[Record]:
        """Logs of ``worker_id`` after checking it belongs to ``bot_id``."""
        if self.store.find_by_id("bots", bot_id) is None:
            raise NotFoundError(f"Bot with id '{bot_id}' not found")

        worker = self._get_or_404(worker_id)
        if worker.get("bot") != bot_id:
            raise BadRequestError(f"Worker '{worker_id}' does not belong to bot '{bot_id}'")

        filters = self._build_filters(filter, ("message", "created"))
        filters["bot"] = bot_id
        return self._related("logs", "worker", worker_id, filters)
