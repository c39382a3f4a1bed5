"""
HTTP client for the BotCRUD API.
Wraps a ``requests.Session``, unwraps the ``{statusCode, message, data}`` envelope and raises ApiClientError on failure.
"""

import json
from typing import Any, Dict, Optional

import requests

from util.logging import logger

DEFAULT_TIMEOUT = 30


class ApiClientError(Exception):
    """Error returned by the API (or raised while talking to it)."""

    def __init__(self, message: str, status_code: int, error_type: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type

    def is_not_found(self) -> bool:
        return self.status_code == 404

    def is_validation_error(self) -> bool:
        return self.status_code == 400

    def is_conflict(self) -> bool:
        return self.status_code == 409

    def __repr__(self) -> str:
        return f"ApiClientError(status_code={self.status_code}, message={self.message!r})"


def _serialize_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, str]]:
    """Drop unset params and JSON-encode structured ones."""
    if not params:
        return None
    serialized = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            serialized[key] = json.dumps(value)
        elif isinstance(value, bool):
            serialized[key] = "true" if value else "false"
        else:
            serialized[key] = str(value)
    return serialized


class HttpClient:
    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT,
                 headers: Optional[Dict[str, str]] = None, debug: bool = False):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.debug = debug
        self.session = requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        if headers:
            self.session.headers.update(headers)

    def _extract_data(self, response: requests.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            raise ApiClientError(f"Invalid JSON response ({response.status_code})", response.status_code)

        if not response.ok:
            if isinstance(body, dict):
                raise ApiClientError(
                    body.get("message") or response.reason or "Unknown error",
                    body.get("statusCode") or response.status_code,
                    body.get("error"),
                )
            raise ApiClientError(response.reason or "Unknown error", response.status_code)

        if not isinstance(body, dict) or body.get("statusCode") != 200:
            message = body.get("message") if isinstance(body, dict) else None
            status = body.get("statusCode") if isinstance(body, dict) else None
            raise ApiClientError(message or "Unknown error", status or response.status_code)

        return body.get("data")

    def request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                json_body: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        if self.debug:
            logger.info(f"[BotCRUD API] {method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                params=_serialize_params(params),
                json=json_body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            if self.debug:
                logger.error(f"[BotCRUD API] Request error: {e}")
            raise ApiClientError(str(e), 500) from e

        if self.debug:
            logger.info(f"[BotCRUD API] Response {response.status_code}")
        return self._extract_data(response)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("POST", path, json_body=data)

    def put(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("PUT", path, json_body=data)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def close(self) -> None:
        self.session.close()
