"""
Bots domain module - business rules for the ``bots`` collection.
"""

from typing import Any, Dict, List, Optional

from util.logging import logger

from .base import DomainModule
from .errors import BadRequestError, ConflictError
from .schema import DEFAULT_BOT_STATUS, BotStatus, Record


class BotsModule(DomainModule):
    collection = "bots"
    entity = "Bot"
    filter_fields = ("name", "description", "status", "created")
    writable_fields = ("name", "description", "status")

    def _validate_status(self, status: Any) -> str:
        if isinstance(status, BotStatus):
            return status.value
        if status not in BotStatus.values():
            raise BadRequestError(f"Invalid status. Must be one of: {', '.join(BotStatus.values())}")
        return status

    def _name_taken(self, name: str, exclude_id: str = None) -> bool:
        return any(
            bot["id"] != exclude_id and self._same_name(bot.get("name"), name)
            for bot in self.store.find_all(self.collection)
        )

    def find_all(self, status: Optional[str] = None, filter: Any = None, page: Any = 0, per_page: Any = None) -> Dict[str, Any]:
        """Paginated bots, newest first, optionally restricted to one status."""
        filters = self._build_filters(filter)
        if status:
            filters["status"] = self._validate_status(status)
        return self._list(filters, page, per_page)

    def create(self, payload: Dict[str, Any]) -> Record:
        data = self._clean_payload(payload)
        name = data.get("name")
        if not name:
            raise self._reject("create", BadRequestError("Name is required"))

        status = data.get("status")
        data["status"] = self._validate_status(status) if status else DEFAULT_BOT_STATUS.value
        data["description"] = data.get("description") or None

        if self._name_taken(name):
            raise self._reject("create", ConflictError(f"Bot with name '{name}' already exists"))

        bot = self.store.create(self.collection, data)
        logger.log_domain_event("bot", "created", bot["id"], {"name": bot["name"]})
        return bot

    def update_by_id(self, bot_id: str, payload: Dict[str, Any]) -> Record:
        bot = self._get_or_404(bot_id)
        data = self._clean_payload(payload)

        if "name" in data:
            if self._name_taken(data["name"], exclude_id=bot_id):
                raise self._reject("update", ConflictError(f"Bot with name '{data['name']}' already exists"))

        if "status" in data:
            data["status"] = self._validate_status(data["status"])

        updated = self.store.update_by_id(self.collection, bot_id, data)
        if updated is None:
            raise self._not_found(bot_id)
        logger.log_domain_event("bot", "updated", bot_id, data)
        return updated

    def delete_by_id(self, bot_id: str) -> Record:
        self._get_or_404(bot_id)

        worker_count = len(self.store.find_by_foreign_key("workers", "bot", bot_id))
        if worker_count > 0:
            raise self._reject("delete", ConflictError(
                f"Cannot delete bot. It has {worker_count} associated worker(s). Delete workers first."
            ))

        deleted = self.store.delete_by_id(self.collection, bot_id)
        if deleted is None:
            raise self._not_found(bot_id)
        logger.log_domain_event("bot", "deleted", bot_id)
        return deleted

    def get_workers(self, bot_id: str, filter: Any = None) -> List[Record]:
        """Workers belonging to ``bot_id``, newest first."""
        self._get_or_404(bot_id)
        filters = self._build_filters(filter, ("name", "description", "created"))
        return self._related("workers", "bot", bot_id, filters)

    def get_logs(self, bot_id: str, filter: Any = None) -> List[Record]:
        """Logs emitted under ``bot_id``, newest first."""
        self._get_or_404(bot_id)
        filters = self._build_filters(filter, ("message", "worker", "created"))
        return self._related("logs", "bot", bot_id, filters)
