"""
Shared behaviour for the bots, workers and logs domain modules.
"""

from typing import Any, Dict, List, Optional, Tuple

from util.logging import logger

from . import config
from .datastore import CollectionStore, is_unconstrained, strict_equals
from .errors import DomainError, NotFoundError
from .query import clamp_page, decode_filter, paginate, sanitize_filter, sort_newest_first
from .sanitizer import sanitize_payload
from .schema import Record


class DomainModule:
    """Business rules for one collection, layered over the shared store."""

    collection: str = ""
    entity: str = ""
    filter_fields: Tuple[str, ...] = ()
    writable_fields: Tuple[str, ...] = ()

    def __init__(self, store: CollectionStore):
        self.store = store

    # ── Internal helpers ──────────────────────────────────────────────────

    def _not_found(self, record_id: str, entity: str = None) -> NotFoundError:
        return NotFoundError(f"{entity or self.entity} with id '{record_id}' not found")

    def _get_or_404(self, record_id: str) -> Record:
        record = self.store.find_by_id(self.collection, record_id)
        if record is None:
            raise self._not_found(record_id)
        return record

    def _clean_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Keep writable fields only and sanitize free text."""
        picked = {k: v for k, v in (payload or {}).items() if k in self.writable_fields}
        return sanitize_payload(picked, config.SANITIZE_FIELDS)

    def _build_filters(self, raw_filter: Any, allowed_fields: Tuple[str, ...] = None) -> Dict[str, Any]:
        fields = self.filter_fields if allowed_fields is None else allowed_fields
        return sanitize_filter(decode_filter(raw_filter), fields)

    def _list(self, filters: Dict[str, Any], page: Any = 0, per_page: Any = None) -> Dict[str, Any]:
        items = sort_newest_first(self.store.find_all(self.collection, filters))
        return paginate(items, clamp_page(page, per_page))

    def _related(self, collection: str, field: str, value: str, filters: Dict[str, Any]) -> List[Record]:
        """Records of ``collection`` pointing at ``value`` that also match ``filters``, newest first."""
        related = self.store.find_by_foreign_key(collection, field, value)
        matching = [
            record for record in related
            if all(strict_equals(record.get(k), v) for k, v in filters.items() if not is_unconstrained(v))
        ]
        return sort_newest_first(matching)

    @staticmethod
    def _same_name(left: Any, right: Any) -> bool:
        """Names match case-insensitively."""
        if not isinstance(left, str) or not isinstance(right, str):
            return False
        return left.casefold() == right.casefold()

    def _reject(self, action: str, error: DomainError) -> DomainError:
        logger.log_domain_rejection(self.entity.lower(), action, error.status_code, error.message)
        return error

    # ── Public API ────────────────────────────────────────────────────────

    def find_by_id(self, record_id: str) -> Record:
        return self._get_or_404(record_id)

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return self.store.count(self.collection, filters)
