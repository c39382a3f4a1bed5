"""
API client tests with the HTTP transport mocked out.
"""

import base64
import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from botcrud.client import ApiClientError, BotCrudApi, HttpClient, encode_filter


def make_response(status_code=200, body=None, reason="OK"):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.reason = reason
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def envelope(data, message="Success"):
    return {"statusCode": 200, "message": message, "data": data}


@pytest.fixture
def api():
    client = BotCrudApi("http://localhost:3000/")
    yield client
    client.close()


class TestHttpClient:
    def test_unwraps_envelope(self):
        http = HttpClient("http://api.test")
        with patch.object(requests.Session, "request", return_value=make_response(body=envelope({"id": "b1"}))) as mock_request:
            assert http.get("/api/bots/b1") == {"id": "b1"}

        args, kwargs = mock_request.call_args
        assert args == ("GET", "http://api.test/api/bots/b1")
        assert kwargs["timeout"] == 30

    def test_error_body_raises(self):
        http = HttpClient("http://api.test")
        body = {"statusCode": 409, "error": "Conflict", "message": "Bot with name 'A' already exists"}
        with patch.object(requests.Session, "request", return_value=make_response(409, body, "Conflict")):
            with pytest.raises(ApiClientError) as exc_info:
                http.post("/api/bots", {"name": "A"})

        error = exc_info.value
        assert error.is_conflict()
        assert not error.is_not_found()
        assert error.error_type == "Conflict"
        assert error.message == "Bot with name 'A' already exists"

    def test_non_200_envelope_raises(self):
        http = HttpClient("http://api.test")
        body = {"statusCode": 201, "message": "Odd", "data": None}
        with patch.object(requests.Session, "request", return_value=make_response(body=body)):
            with pytest.raises(ApiClientError) as exc_info:
                http.get("/health")
        assert exc_info.value.status_code == 201

    def test_invalid_json_raises(self):
        http = HttpClient("http://api.test")
        with patch.object(requests.Session, "request", return_value=make_response(502, ValueError("no json"), "Bad Gateway")):
            with pytest.raises(ApiClientError) as exc_info:
                http.get("/health")
        assert exc_info.value.status_code == 502

    def test_transport_error_becomes_api_error(self):
        http = HttpClient("http://api.test")
        with patch.object(requests.Session, "request", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(ApiClientError) as exc_info:
                http.get("/health")
        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_params_drop_none(self):
        http = HttpClient("http://api.test")
        with patch.object(requests.Session, "request", return_value=make_response(body=envelope([]))) as mock_request:
            http.get("/api/logs", {"bot": "b1", "worker": None, "page": 0})
        assert mock_request.call_args.kwargs["params"] == {"bot": "b1", "page": "0"}

    def test_custom_headers(self):
        http = HttpClient("http://api.test", headers={"Authorization": "Bearer t"})
        assert http.session.headers["Authorization"] == "Bearer t"
        assert http.session.headers["Content-Type"] == "application/json"


def test_encode_filter_round_trips_through_base64():
    encoded = encode_filter({"status": "ENABLED"})
    assert json.loads(base64.b64decode(encoded)) == {"status": "ENABLED"}
    assert encode_filter({}) is None
    assert encode_filter(None) is None


class TestServices:
    def test_bots_create(self, api):
        with patch.object(requests.Session, "request", return_value=make_response(body=envelope({"id": "b1"}))) as mock_request:
            api.bots.create("Bot A", status="ENABLED")

        args, kwargs = mock_request.call_args
        assert args == ("POST", "http://localhost:3000/api/bots")
        assert kwargs["json"] == {"name": "Bot A", "status": "ENABLED"}

    def test_bots_list_encodes_filter(self, api):
        with patch.object(requests.Session, "request", return_value=make_response(body=envelope({"items": []}))) as mock_request:
            api.bots.list(status="PAUSED", filter={"name": "X"}, per_page=5)

        params = mock_request.call_args.kwargs["params"]
        assert params["status"] == "PAUSED"
        assert params["perPage"] == "5"
        assert json.loads(base64.b64decode(params["filter"])) == {"name": "X"}

    def test_workers_reassign(self, api):
        with patch.object(requests.Session, "request", return_value=make_response(body=envelope({}))) as mock_request:
            api.workers.reassign("w1", "b2")

        args, kwargs = mock_request.call_args
        assert args == ("PUT", "http://localhost:3000/api/workers/w1")
        assert kwargs["json"] == {"bot": "b2"}

    def test_logs_by_bot_and_worker(self, api):
        with patch.object(requests.Session, "request", return_value=make_response(body=envelope({"items": []}))) as mock_request:
            api.logs.get_by_bot_and_worker("b1", "w1")

        params = mock_request.call_args.kwargs["params"]
        assert params == {"bot": "b1", "worker": "w1"}

    def test_logs_log_shorthand(self, api):
        with patch.object(requests.Session, "request", return_value=make_response(body=envelope({}))) as mock_request:
            api.logs.log("hello", "b1", "w1")
        assert mock_request.call_args.kwargs["json"] == {"message": "hello", "bot": "b1", "worker": "w1"}

    def test_health_is_healthy(self, api):
        with patch.object(requests.Session, "request", return_value=make_response(body=envelope({"status": "healthy"}))):
            assert api.health.is_healthy() is True

        with patch.object(requests.Session, "request", side_effect=requests.Timeout("slow")):
            assert api.health.is_healthy() is False

    def test_health_stats(self, api):
        detailed = {"stats": {"bots": 1}, "memory": {"rss": 10}, "uptime": 1.5}
        with patch.object(requests.Session, "request", return_value=make_response(body=envelope(detailed))):
            assert api.health.get_stats() == {"bots": 1}
            assert api.health.get_memory_usage() == {"rss": 10}
            assert api.health.get_uptime() == 1.5


def test_api_context_manager_closes_session():
    with patch.object(requests.Session, "close") as mock_close:
        with BotCrudApi("http://api.test") as api:
            assert api.http.base_url == "http://api.test"
    mock_close.assert_called_once()
