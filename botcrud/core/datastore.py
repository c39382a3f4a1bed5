"""
In-memory collection store.

Each named collection is an ordered list of records loaded once from
``<data_dir>/<collection>.json``. Reads are linear scans; there is no
secondary index and nothing is written back to disk.

Usage::

    store = CollectionStore(data_dir="./data")
    store.initialize()

    bot = store.create("bots", {"name": "Bot A", "status": "ENABLED"})
    enabled = store.find_all("bots", {"status": "ENABLED"})
    store.update_by_id("bots", bot["id"], {"status": "PAUSED"})
    store.delete_by_id("bots", bot["id"])
"""

import copy
import json
import threading
from numbers import Number
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from util.logging import logger

from .config import COLLECTIONS
from .errors import UnknownCollectionError
from .schema import Record, RecordPatch, new_record_id, now_ms

__all__ = ["CollectionStore", "strict_equals", "is_unconstrained"]


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without cross-type coercion.

    ``True`` never equals ``1`` and ``"1"`` never equals ``1``; ints and
    floats still compare numerically.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if isinstance(left, Number) and isinstance(right, Number):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def is_unconstrained(value: Any) -> bool:
    """Filter values that place no constraint on a field."""
    return value is None or (isinstance(value, str) and value == "")


class CollectionStore:
    """
    Owner of all named collections and the only access path to their records.

    Records handed out are deep copies: mutating a returned record never
    changes what the store holds. A per-collection lock makes each operation
    atomic when the HTTP layer runs handlers on worker threads.
    """

    def __init__(self, data_dir, collections: Iterable[str] = COLLECTIONS):
        self._data_dir = Path(data_dir)
        self._collections = tuple(collections)
        self._data: Dict[str, List[Record]] = {name: [] for name in self._collections}
        self._locks = {name: threading.RLock() for name in self._collections}

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def collections(self) -> tuple:
        return self._collections

    def __contains__(self, collection: str) -> bool:
        return collection in self._data

    # ── Internal helpers ──────────────────────────────────────────────────

    def _records(self, collection: str) -> List[Record]:
        try:
            return self._data[collection]
        except KeyError:
            raise UnknownCollectionError(collection) from None

    def _lock(self, collection: str) -> threading.RLock:
        try:
            return self._locks[collection]
        except KeyError:
            raise UnknownCollectionError(collection) from None

    def _path_for(self, collection: str) -> Path:
        return self._data_dir / f"{collection}.json"

    def _index_of(self, records: List[Record], record_id: Any) -> int:
        for index, record in enumerate(records):
            if strict_equals(record.get("id"), record_id):
                return index
        return -1

    @staticmethod
    def _matches(record: Record, filters: Mapping[str, Any]) -> bool:
        for key, expected in filters.items():
            if is_unconstrained(expected):
                continue
            if key not in record or not strict_equals(record[key], expected):
                return False
        return True

    def _load(self, collection: str) -> List[Record]:
        path = self._path_for(collection)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
            if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
                raise ValueError("expected a JSON array of objects")
        except (OSError, ValueError) as e:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
            logger.log_load_failure(collection, str(path), e)
            return []

        logger.log_collection_loaded(collection, len(data))
        return data

    # ── Public API ────────────────────────────────────────────────────────

    def initialize(self) -> None:
        """
        Load every configured collection from its backing file.

        A missing or malformed file leaves that collection empty; it never
        fails the process. Calling again discards in-memory changes.
        """
        for collection in self._collections:
            with self._locks[collection]:
                self._data[collection] = self._load(collection)

    def find_all(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> List[Record]:
        """
        Return every record whose fields equal all ``filters`` values.

        Filter entries whose value is None or "" are ignored. Original
        insertion order is preserved.
        """
        filters = filters or {}
        with self._lock(collection):
            return [
                copy.deepcopy(record)
                for record in self._records(collection)
                if self._matches(record, filters)
            ]

    def find_by_id(self, collection: str, record_id: Any) -> Optional[Record]:
        """Return the record with ``record_id``, or None when absent."""
        with self._lock(collection):
            records = self._records(collection)
            index = self._index_of(records, record_id)
            return copy.deepcopy(records[index]) if index != -1 else None

    def create(self, collection: str, data: Optional[Mapping[str, Any]] = None) -> Record:
        """
        Append a new record built from ``data`` plus a fresh ``id`` and ``created``.

        Caller-supplied ``id``/``created`` values are discarded.
        """
        patch = RecordPatch.from_mapping(copy.deepcopy(dict(data or {})))
        with self._lock(collection):
            records = self._records(collection)
            record = patch.apply_to({})
            record["id"] = new_record_id()
            record["created"] = now_ms()
            records.append(record)
            logger.log_store_operation(collection, "create", record["id"])
            return copy.deepcopy(record)

    def update_by_id(self, collection: str, record_id: Any, data: Optional[Mapping[str, Any]] = None) -> Optional[Record]:
        """
        Merge ``data`` into the record with ``record_id`` and return it.

        ``id`` and ``created`` in ``data`` are silently dropped. Returns None
        and changes nothing when the record is absent.
        """
        patch = RecordPatch.from_mapping(copy.deepcopy(dict(data or {})))
        with self._lock(collection):
            records = self._records(collection)
            index = self._index_of(records, record_id)
            if index == -1:
                return None

            record = patch.apply_to(records[index])
            logger.log_store_operation(collection, "update", record["id"])
            return copy.deepcopy(record)

    def delete_by_id(self, collection: str, record_id: Any) -> Optional[Record]:
        """Remove and return the record with ``record_id``, or None when absent."""
        with self._lock(collection):
            records = self._records(collection)
            index = self._index_of(records, record_id)
            if index == -1:
                return None

            record = records.pop(index)
            logger.log_store_operation(collection, "delete", record.get("id"))
            return record

    def find_by_foreign_key(self, collection: str, field: str, value: Any) -> List[Record]:
        """Return every record whose ``field`` strictly equals ``value``."""
        with self._lock(collection):
            return [
                copy.deepcopy(record)
                for record in self._records(collection)
                if field in record and strict_equals(record[field], value)
            ]

    def count(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Number of records ``find_all`` would return for the same arguments."""
        filters = filters or {}
        with self._lock(collection):
            return sum(1 for record in self._records(collection) if self._matches(record, filters))
