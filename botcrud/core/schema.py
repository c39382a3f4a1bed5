"""
Record types shared by the store and the domain modules.
Records are plain dicts; every stored record carries an ``id`` and a ``created`` epoch-ms stamp.
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

IMMUTABLE_FIELDS = ("id", "created")

Record = Dict[str, Any]


class BotStatus(str, Enum):
    DISABLED = "DISABLED"
    ENABLED = "ENABLED"
    PAUSED = "PAUSED"

    @classmethod
    def values(cls):
        return [status.value for status in cls]


DEFAULT_BOT_STATUS = BotStatus.DISABLED


def new_record_id() -> str:
    """Generate a unique record identifier."""
    return str(uuid.uuid4())


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class RecordPatch:
    """Caller-supplied fields with ``id`` and ``created`` already removed.

    Both create and update go through this wrapper, so no write path can
    overwrite the store-owned fields.
    """

    fields: Dict[str, Any] = field(default_factory=dict)
    discarded: tuple = ()

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "RecordPatch":
        data = dict(data or {})
        discarded = tuple(name for name in IMMUTABLE_FIELDS if name in data)
        for name in discarded:
            data.pop(name)
        return cls(fields=data, discarded=discarded)

    def apply_to(self, record: Record) -> Record:
        """Merge the patch into ``record`` in place and return it."""
        record.update(self.fields)
        return record

    def __bool__(self) -> bool:
        return bool(self.fields)
