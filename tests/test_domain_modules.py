"""
Bots, workers and logs business rules on top of the collection store.
"""

import base64
import json

import pytest

from botcrud.core.bots import BotsModule
from botcrud.core.datastore import CollectionStore
from botcrud.core.errors import BadRequestError, ConflictError, NotFoundError
from botcrud.core.logs import LogsModule
from botcrud.core.workers import WorkersModule


def encode(obj) -> str:
    return base64.b64encode(json.dumps(obj).encode("utf-8")).decode("ascii")


@pytest.fixture
def store(tmp_path):
    store = CollectionStore(tmp_path)
    store.initialize()
    return store


@pytest.fixture
def bots(store):
    return BotsModule(store)


@pytest.fixture
def workers(store):
    return WorkersModule(store)


@pytest.fixture
def logs(store):
    return LogsModule(store)


@pytest.fixture
def populated(store, bots, workers, logs):
    """Two bots, three workers, four logs with distinct created stamps."""
    alpha = bots.create({"name": "Alpha", "status": "ENABLED"})
    beta = bots.create({"name": "Beta"})
    w1 = workers.create({"name": "Collector", "bot": alpha["id"]})
    w2 = workers.create({"name": "Reporter", "bot": alpha["id"]})
    w3 = workers.create({"name": "Collector", "bot": beta["id"]})
    l1 = logs.create({"message": "started", "bot": alpha["id"], "worker": w1["id"]})
    l2 = logs.create({"message": "finished", "bot": alpha["id"], "worker": w1["id"]})
    l3 = logs.create({"message": "started", "bot": alpha["id"], "worker": w2["id"]})
    l4 = logs.create({"message": "idle", "bot": beta["id"], "worker": w3["id"]})

    # Spread creation times so newest-first ordering is deterministic
    for offset, (collection, record) in enumerate([
        ("bots", alpha), ("bots", beta),
        ("workers", w1), ("workers", w2), ("workers", w3),
        ("logs", l1), ("logs", l2), ("logs", l3), ("logs", l4),
    ]):
        store._data[collection][store._index_of(store._data[collection], record["id"])]["created"] = 1000 + offset

    return {
        "alpha": alpha, "beta": beta,
        "w1": w1, "w2": w2, "w3": w3,
        "l1": l1, "l2": l2, "l3": l3, "l4": l4,
    }


class TestBots:
    def test_create_defaults(self, bots):
        bot = bots.create({"name": "Gamma"})
        assert bot["status"] == "DISABLED"
        assert bot["description"] is None
        assert bot["id"] and bot["created"]

    def test_create_drops_unknown_fields(self, bots):
        bot = bots.create({"name": "Gamma", "id": "forced", "owner": "me"})
        assert bot["id"] != "forced"
        assert "owner" not in bot

    def test_create_sanitizes_text(self, bots):
        bot = bots.create({"name": "  <b>Bold</b> ", "description": "<script>x</script>ok"})
        assert bot["name"] == "&lt;b&gt;Bold&lt;&#x2F;b&gt;"
        assert bot["description"] == "ok"

    def test_create_requires_name(self, bots):
        with pytest.raises(BadRequestError, match="Name is required"):
            bots.create({"description": "nameless"})

    def test_create_rejects_invalid_status(self, bots):
        with pytest.raises(BadRequestError, match="Invalid status"):
            bots.create({"name": "Gamma", "status": "RUNNING"})

    def test_duplicate_name_conflicts(self, bots, populated):
        with pytest.raises(ConflictError) as exc_info:
            bots.create({"name": "Alpha"})
        assert exc_info.value.message == "Bot with name 'Alpha' already exists"
        assert exc_info.value.status_code == 409

    def test_find_by_id_missing(self, bots):
        with pytest.raises(NotFoundError) as exc_info:
            bots.find_by_id("missing")
        assert exc_info.value.message == "Bot with id 'missing' not found"

    def test_find_all_newest_first_and_paginated(self, bots, populated):
        result = bots.find_all(page=0, per_page=1)
        assert result["count"] == 2
        assert result["perPage"] == 1
        assert [b["name"] for b in result["items"]] == ["Beta"]

    def test_find_all_by_status(self, bots, populated):
        result = bots.find_all(status="ENABLED")
        assert [b["name"] for b in result["items"]] == ["Alpha"]

    def test_find_all_invalid_status(self, bots):
        with pytest.raises(BadRequestError):
            bots.find_all(status="BOGUS")

    def test_find_all_with_encoded_filter(self, bots, populated):
        result = bots.find_all(filter=encode({"name": "Beta", "secret": "ignored"}))
        assert [b["name"] for b in result["items"]] == ["Beta"]

    def test_update(self, bots, populated):
        updated = bots.update_by_id(populated["alpha"]["id"], {"status": "PAUSED", "created": 0})
        assert updated["status"] == "PAUSED"
        assert updated["created"] == 1000

    def test_duplicate_name_ignores_case(self, bots, populated):
        with pytest.raises(ConflictError):
            bots.create({"name": "alpha"})
        with pytest.raises(ConflictError):
            bots.update_by_id(populated["beta"]["id"], {"name": "ALPHA"})

    def test_recase_own_name_is_allowed(self, bots, populated):
        assert bots.update_by_id(populated["alpha"]["id"], {"name": "ALPHA"})["name"] == "ALPHA"

    def test_update_same_name_is_allowed(self, bots, populated):
        updated = bots.update_by_id(populated["alpha"]["id"], {"name": "Alpha"})
        assert updated["name"] == "Alpha"

    def test_update_to_taken_name_conflicts(self, bots, populated):
        with pytest.raises(ConflictError):
            bots.update_by_id(populated["beta"]["id"], {"name": "Alpha"})

    def test_update_missing(self, bots):
        with pytest.raises(NotFoundError):
            bots.update_by_id("missing", {"name": "X"})

    def test_delete_blocked_by_workers(self, bots, populated):
        with pytest.raises(ConflictError) as exc_info:
            bots.delete_by_id(populated["alpha"]["id"])
        assert exc_info.value.message == (
            "Cannot delete bot. It has 2 associated worker(s). Delete workers first."
        )

    def test_delete(self, bots):
        bot = bots.create({"name": "Lonely"})
        assert bots.delete_by_id(bot["id"])["id"] == bot["id"]
        with pytest.raises(NotFoundError):
            bots.find_by_id(bot["id"])

    def test_get_workers(self, bots, populated):
        names = [w["name"] for w in bots.get_workers(populated["alpha"]["id"])]
        assert names == ["Reporter", "Collector"]

    def test_get_workers_filtered(self, bots, populated):
        result = bots.get_workers(populated["alpha"]["id"], filter={"name": "Collector"})
        assert [w["id"] for w in result] == [populated["w1"]["id"]]

    def test_get_logs(self, bots, populated):
        messages = [l["message"] for l in bots.get_logs(populated["alpha"]["id"])]
        assert messages == ["started", "finished", "started"]

    def test_related_lookups_require_bot(self, bots):
        with pytest.raises(NotFoundError):
            bots.get_workers("missing")
        with pytest.raises(NotFoundError):
            bots.get_logs("missing")

    def test_count(self, bots, populated):
        assert bots.count() == 2
        assert bots.count({"status": "ENABLED"}) == 1


class TestWorkers:
    def test_create_requires_existing_bot(self, workers):
        with pytest.raises(BadRequestError, match="Bot with id 'ghost' not found"):
            workers.create({"name": "Orphan", "bot": "ghost"})

    def test_name_unique_per_bot(self, workers, populated):
        with pytest.raises(ConflictError, match="already exists for this bot"):
            workers.create({"name": "Reporter", "bot": populated["alpha"]["id"]})

        # Same name under another bot is fine
        worker = workers.create({"name": "Reporter", "bot": populated["beta"]["id"]})
        assert worker["bot"] == populated["beta"]["id"]

    def test_find_all_by_bot(self, workers, populated):
        result = workers.find_all(bot=populated["beta"]["id"])
        assert [w["id"] for w in result["items"]] == [populated["w3"]["id"]]

    def test_find_all_unknown_bot(self, workers):
        with pytest.raises(BadRequestError):
            workers.find_all(bot="ghost")

    def test_reassign(self, workers, populated):
        updated = workers.update_by_id(populated["w2"]["id"], {"bot": populated["beta"]["id"]})
        assert updated["bot"] == populated["beta"]["id"]

    def test_reassign_to_missing_bot(self, workers, populated):
        with pytest.raises(BadRequestError):
            workers.update_by_id(populated["w2"]["id"], {"bot": "ghost"})

    def test_reassign_into_name_clash(self, workers, populated):
        # w1 "Collector" cannot move to beta, which already has a "Collector"
        with pytest.raises(ConflictError):
            workers.update_by_id(populated["w1"]["id"], {"name": "Collector", "bot": populated["beta"]["id"]})

    def test_reassign_alone_into_name_clash(self, workers, populated):
        # Only the bot changes; beta already has a "Collector"
        with pytest.raises(ConflictError):
            workers.update_by_id(populated["w1"]["id"], {"bot": populated["beta"]["id"]})
        assert workers.find_by_id(populated["w1"]["id"])["bot"] == populated["alpha"]["id"]

    def test_name_unique_per_bot_ignores_case(self, workers, populated):
        with pytest.raises(ConflictError):
            workers.create({"name": "COLLECTOR", "bot": populated["alpha"]["id"]})
        with pytest.raises(ConflictError):
            workers.update_by_id(populated["w2"]["id"], {"name": "collector"})

    def test_rename_own_case_is_allowed(self, workers, populated):
        updated = workers.update_by_id(populated["w2"]["id"], {"name": "REPORTER"})
        assert updated["name"] == "REPORTER"

    def test_rename_into_sibling_name(self, workers, populated):
        with pytest.raises(ConflictError):
            workers.update_by_id(populated["w2"]["id"], {"name": "Collector"})

    def test_delete_blocked_by_logs(self, workers, populated):
        with pytest.raises(ConflictError) as exc_info:
            workers.delete_by_id(populated["w1"]["id"])
        assert "2 associated log(s)" in exc_info.value.message

    def test_delete(self, workers, populated):
        worker = workers.create({"name": "Spare", "bot": populated["beta"]["id"]})
        workers.delete_by_id(worker["id"])
        with pytest.raises(NotFoundError, match="Worker with id"):
            workers.find_by_id(worker["id"])

    def test_get_logs(self, workers, populated):
        logs = workers.get_logs(populated["w1"]["id"])
        assert [l["message"] for l in logs] == ["finished", "started"]

    def test_get_logs_for_bot_worker(self, workers, populated):
        logs = workers.get_logs_for_bot_worker(populated["alpha"]["id"], populated["w1"]["id"],
                                               filter={"message": "started"})
        assert [l["id"] for l in logs] == [populated["l1"]["id"]]

    def test_get_logs_for_bot_worker_mismatch(self, workers, populated):
        with pytest.raises(BadRequestError, match="does not belong to bot"):
            workers.get_logs_for_bot_worker(populated["beta"]["id"], populated["w1"]["id"])

    def test_get_logs_for_bot_worker_missing(self, workers, populated):
        with pytest.raises(NotFoundError, match="Bot with id"):
            workers.get_logs_for_bot_worker("ghost", populated["w1"]["id"])
        with pytest.raises(NotFoundError, match="Worker with id"):
            workers.get_logs_for_bot_worker(populated["alpha"]["id"], "ghost")


class TestLogs:
    def test_create_validates_references(self, logs, populated):
        with pytest.raises(BadRequestError, match="Bot with id"):
            logs.create({"message": "x", "bot": "ghost", "worker": populated["w1"]["id"]})
        with pytest.raises(BadRequestError, match="Worker with id"):
            logs.create({"message": "x", "bot": populated["alpha"]["id"], "worker": "ghost"})
        with pytest.raises(BadRequestError, match="does not belong to bot"):
            logs.create({"message": "x", "bot": populated["beta"]["id"], "worker": populated["w1"]["id"]})

    def test_create_requires_message(self, logs, populated):
        with pytest.raises(BadRequestError, match="Message is required"):
            logs.create({"bot": populated["alpha"]["id"], "worker": populated["w1"]["id"]})

    def test_create_sanitizes_message(self, logs, populated):
        log = logs.create({"message": "<script>x</script>done", "bot": populated["beta"]["id"],
                           "worker": populated["w3"]["id"]})
        assert log["message"] == "done"

    def test_find_all_filters(self, logs, populated):
        by_worker = logs.find_all(worker=populated["w1"]["id"])
        assert by_worker["count"] == 2

        by_bot_and_message = logs.find_all(bot=populated["alpha"]["id"], filter=encode({"message": "started"}))
        assert [l["id"] for l in by_bot_and_message["items"]] == [populated["l3"]["id"], populated["l1"]["id"]]

    def test_update_only_message(self, logs, populated):
        updated = logs.update_by_id(populated["l4"]["id"], {"message": "busy", "bot": populated["alpha"]["id"]})
        assert updated["message"] == "busy"
        assert updated["bot"] == populated["beta"]["id"]

    def test_update_requires_message(self, logs, populated):
        with pytest.raises(BadRequestError):
            logs.update_by_id(populated["l4"]["id"], {"bot": populated["alpha"]["id"]})

    def test_delete(self, logs, populated):
        logs.delete_by_id(populated["l4"]["id"])
        with pytest.raises(NotFoundError, match="Log with id"):
            logs.find_by_id(populated["l4"]["id"])
        with pytest.raises(NotFoundError):
            logs.delete_by_id(populated["l4"]["id"])
