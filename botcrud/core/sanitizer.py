"""
XSS sanitising for free-text fields (bot/worker names and descriptions, log messages).
"""

import re
from typing import Any, Dict, Iterable

HTML_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
    "`": "&#x60;",
    "=": "&#x3D;",
}

HTML_ENTITIES_RE = re.compile(r"[&<>\"'`=/]")

DANGEROUS_PATTERNS = [
    # Script tags
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    # Event handlers
    re.compile(r"\bon\w+\s*=", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"data:\s*text/html", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    # IE expression()
    re.compile(r"expression\s*\(", re.IGNORECASE),
]


def escape_html(value: Any) -> Any:
    """Escape HTML entities; non-strings are returned unchanged."""
    if not isinstance(value, str):
        return value
    return HTML_ENTITIES_RE.sub(lambda m: HTML_ENTITIES[m.group(0)], value)


def strip_dangerous_patterns(value: Any) -> Any:
    """Remove script tags, inline handlers and script URLs."""
    if not isinstance(value, str):
        return value
    for pattern in DANGEROUS_PATTERNS:
        value = pattern.sub("", value)
    return value


def contains_dangerous_pattern(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return any(pattern.search(value) for pattern in DANGEROUS_PATTERNS)


def sanitize_string(value: Any, escape: bool = True, strip_dangerous: bool = True, trim: bool = True) -> Any:
    """
    Sanitize a string for storage and display.

    Whitespace is trimmed first, dangerous patterns stripped next and HTML
    entities escaped last, so stripped markup is never double-escaped.
    """
    if not isinstance(value, str):
        return value

    if trim:
        value = value.strip()
    if strip_dangerous:
        value = strip_dangerous_patterns(value)
    if escape:
        value = escape_html(value)
    return value


def sanitize_payload(payload: Dict[str, Any], text_fields: Iterable[str]) -> Dict[str, Any]:
    """Return a copy of ``payload`` with the named string fields sanitized."""
    if not isinstance(payload, dict):
        return payload

    result = dict(payload)
    for field in text_fields:
        if isinstance(result.get(field), str):
            result[field] = sanitize_string(result[field])
    return result
