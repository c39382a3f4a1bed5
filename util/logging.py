"""
Structured logging for BotCRUD.
Thin wrapper over the stdlib logger so store, domain and HTTP events share one format.
"""

import logging
from typing import Any, Dict


def _truncate(value: Any, limit: int = 50) -> Any:
    if isinstance(value, str) and len(value) > limit:
        return value[:limit] + "..."
    return value


class StructuredLogger:
    """Structured logger for store, domain and request events."""

    def __init__(self, name: str = "botcrud"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status in ("failed", "error"):
            self.logger.error(message)
        else:
            self.logger.info(message)

    def log_store_operation(self, collection: str, operation: str, record_id: str = None, status: str = "success"):
        """Log a collection store mutation."""
        details = {"collection": collection}
        if record_id is not None:
            details["id"] = record_id

        self.log_operation(f"store.{operation}", status, details)

    def log_collection_loaded(self, collection: str, count: int):
        """Log a collection populated from its backing file."""
        self.log_operation("store.load", "success", {"collection": collection, "records": count})

    def log_load_failure(self, collection: str, path: str, error: Any):
        """Log a collection that could not be loaded and starts empty."""
        details = {
            "collection": collection,
            "path": path,
            "error": _truncate(str(error), 100),
        }
        self.log_operation("store.load", "failed", details)

    def log_domain_event(self, entity: str, action: str, record_id: str = None, details: Dict[str, Any] = None):
        """Log a domain-level change (bot created, worker reassigned, ...)."""
        log_details = {"entity": entity}
        if record_id is not None:
            log_details["id"] = record_id
        if details:
            log_details.update(sanitize_payload(details))

        self.log_operation(f"{entity}.{action}", "success", log_details)

    def log_domain_rejection(self, entity: str, action: str, status_code: int, reason: str):
        """Log a domain rule violation returned to the caller."""
        details = {
            "entity": entity,
            "status_code": status_code,
            "reason": _truncate(reason, 100),
        }
        self.log_operation(f"{entity}.{action}", "rejected", details)

    def log_request(self, method: str, path: str, status_code: int, duration_ms: float):
        """Log a completed HTTP request."""
        details = {
            "status_code": status_code,
            "duration_ms": round(duration_ms, 2),
        }
        self.log_operation(f"http.{method} {path}", "completed", details)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

# Global logger instance
logger = StructuredLogger()


def sanitize_payload(payload: Any, sensitive_fields=None) -> Any:
    """Truncate and redact payloads before they are written to the log."""
    if sensitive_fields is None:
        sensitive_fields = ['password', 'secret', 'token']

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if k in sensitive_fields:
                sanitized[k] = "[REDACTED]"
            else:
                sanitized[k] = sanitize_payload(v, sensitive_fields)
        return sanitized
    elif isinstance(payload, str):
        return _truncate(payload)
    elif isinstance(payload, list):
        return [sanitize_payload(item, sensitive_fields) for item in payload]
    else:
        return payload
