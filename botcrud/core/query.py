"""
List-query helpers: filter decoding, equality-only filter sanitising and pagination.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

from . import config
from .errors import BadRequestError
from .schema import Record

FORBIDDEN_KEYS = ("__proto__", "constructor", "prototype")


def decode_filter(raw: Union[str, Dict[str, Any], None]) -> Dict[str, Any]:
    """
    Turn a transport filter into a dict.

    Strings are base64-encoded JSON objects; dicts pass through unchanged.
    """
    if raw is None or raw == "" or raw == {}:
        return {}
    if isinstance(raw, dict):
        return raw

    try:
        decoded = base64.b64decode(raw, validate=True).decode("utf-8")
        parsed = json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, ValueError, TypeError):
        raise BadRequestError("Invalid filter format: must be valid base64-encoded JSON")

    if not isinstance(parsed, dict):
        raise BadRequestError("Invalid filter format: must be valid base64-encoded JSON")
    return parsed


def sanitize_filter(filter: Optional[Dict[str, Any]], allowed_fields: Iterable[str]) -> Dict[str, Any]:
    """
    Reduce a user filter to plain field equality.

    Operators, prototype keys, nested values and ``$``-prefixed strings are
    rejected; fields outside ``allowed_fields`` are dropped.
    """
    if not isinstance(filter, dict):
        return {}

    allowed = set(allowed_fields)
    sanitized = {}
    for key, value in filter.items():
        if key.startswith("$"):
            raise BadRequestError(f'Operator "{key}" is not allowed in queries')
        if key in FORBIDDEN_KEYS:
            raise BadRequestError(f'Invalid query key: "{key}"')
        if key not in allowed:
            continue
        if isinstance(value, (dict, list)):
            raise BadRequestError(f'Invalid query value for "{key}": only equality filters are supported')
        if isinstance(value, str) and value.startswith("$"):
            raise BadRequestError(f'Invalid query value: "{value}"')
        sanitized[key] = value

    return sanitized


@dataclass(frozen=True)
class Page:
    page: int = 0
    per_page: int = config.DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return self.page * self.per_page


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def clamp_page(page: Any = 0, per_page: Any = None) -> Page:
    """Coerce raw pagination params into range: page >= 0, 1 <= per_page <= MAX_PAGE_SIZE."""
    page_num = max(0, _as_int(page, 0))
    per_page_num = _as_int(per_page, config.DEFAULT_PAGE_SIZE)
    # 0 means "unset", like a missing value
    if per_page_num < 1:
        per_page_num = config.DEFAULT_PAGE_SIZE if per_page_num == 0 else 1
    per_page_num = min(config.MAX_PAGE_SIZE, per_page_num)
    return Page(page=page_num, per_page=per_page_num)


def sort_newest_first(items: List[Record]) -> List[Record]:
    """Sort by ``created`` descending; ties keep their stored order."""
    return sorted(items, key=lambda item: item.get("created") or 0, reverse=True)


def paginate(items: List[Record], page: Page) -> Dict[str, Any]:
    """Slice ``items`` for ``page``; ``count`` is the total before slicing."""
    return {
        "count": len(items),
        "items": items[page.offset:page.offset + page.per_page],
        "page": page.page,
        "perPage": page.per_page,
    }
