"""
Python client for the BotCRUD REST API.

    api = BotCrudApi("http://localhost:3000")
    bot = api.bots.create("Bot A", status="ENABLED")
    api.workers.create("Worker 1", bot=bot["id"])
"""

from .http import ApiClientError, HttpClient
from .services import BotsService, HealthService, LogsService, WorkersService, encode_filter


class BotCrudApi:
    """Facade bundling one service per resource over a shared HttpClient."""

    def __init__(self, base_url: str, timeout: float = 30, headers=None, debug: bool = False):
        self.http = HttpClient(base_url, timeout=timeout, headers=headers, debug=debug)
        self.bots = BotsService(self.http)
        self.workers = WorkersService(self.http)
        self.logs = LogsService(self.http)
        self.health = HealthService(self.http)

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


__all__ = [
    'BotCrudApi',
    'HttpClient',
    'ApiClientError',
    'BotsService',
    'WorkersService',
    'LogsService',
    'HealthService',
    'encode_filter',
]
