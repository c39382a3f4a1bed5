#!/usr/bin/env python3
"""
Seed data generator - writes bots.json, workers.json and logs.json for the collection store.
"""

import argparse
import json
import random
import sys
from pathlib import Path

# Add the parent directory to sys.path to import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from botcrud.core.config import get_data_dir
from botcrud.core.schema import BotStatus, new_record_id, now_ms
from util.logging import logger

SIX_MONTHS_MS = 6 * 30 * 24 * 60 * 60 * 1000

BOT_PREFIXES = [
    'Auto', 'Smart', 'Data', 'Task', 'Process', 'Report', 'Alert', 'Monitor',
    'Sync', 'Integration', 'Analytics', 'Backup', 'Security', 'Audit', 'Notify',
    'Schedule', 'Workflow', 'Pipeline', 'ETL', 'API', 'Web', 'Email', 'Chat',
    'Inventory', 'Order', 'Shipping', 'Payment', 'Invoice', 'Customer', 'Product',
]

BOT_SUFFIXES = [
    'Bot', 'Agent', 'Worker', 'Processor', 'Handler', 'Manager', 'Service',
    'System', 'Engine', 'Controller', 'Automator', 'Assistant', 'Helper',
]

BOT_DESCRIPTIONS = [
    'Automated task scheduling and execution',
    'Data processing and transformation pipeline',
    'Real-time monitoring and alerting system',
    'Report generation and distribution',
    'System integration and synchronization',
    'Analytics and metrics collection',
    'Backup and recovery automation',
    'Security scanning and compliance',
    'Notification and messaging service',
    'Workflow orchestration engine',
]

WORKER_TYPES = [
    'Executor', 'Collector', 'Processor', 'Validator', 'Transformer',
    'Aggregator', 'Dispatcher', 'Scheduler', 'Monitor', 'Reporter',
    'Analyzer', 'Cleaner', 'Archiver', 'Notifier', 'Syncer',
]

WORKER_DESCRIPTIONS = [
    'Primary task execution unit',
    'Data collection and ingestion',
    'Batch processing worker',
    'Real-time stream processor',
    'Validation and quality check',
    'Message queue consumer',
    'Scheduled job executor',
    'Health check monitor',
]

LOG_MESSAGES = [
    'Task execution started',
    'Task completed successfully',
    'Processing data batch {n}',
    'Connection established to upstream service',
    'Retrying failed operation (attempt {n})',
    'Cache refreshed with {n} entries',
    'Validation passed for {n} records',
    'Warning: response time exceeded threshold',
    'Error: upstream service unavailable',
    'Heartbeat received',
]

# Rough real-world status mix
STATUS_WEIGHTS = {
    BotStatus.ENABLED.value: 0.6,
    BotStatus.PAUSED.value: 0.15,
    BotStatus.DISABLED.value: 0.25,
}


def _random_created(rng: random.Random, start_ms: int, end_ms: int) -> int:
    return rng.randint(start_ms, max(start_ms, end_ms))


def generate_bots(count: int, rng: random.Random, end_ms: int = None):
    """Generate ``count`` bots with unique names."""
    end_ms = end_ms if end_ms is not None else now_ms()
    start_ms = end_ms - SIX_MONTHS_MS
    statuses, weights = zip(*STATUS_WEIGHTS.items())

    bots = []
    used_names = set()
    for i in range(count):
        name = f"{rng.choice(BOT_PREFIXES)} {rng.choice(BOT_SUFFIXES)}"
        if name in used_names:
            name = f"{name} {i + 1}"
        used_names.add(name)

        bots.append({
            "id": new_record_id(),
            "name": name,
            "description": rng.choice(BOT_DESCRIPTIONS) if rng.random() > 0.1 else None,
            "status": rng.choices(statuses, weights=weights)[0],
            "created": _random_created(rng, start_ms, end_ms),
        })
    return bots


def generate_workers(count: int, bots, rng: random.Random, end_ms: int = None):
    """Generate ``count`` workers spread over ``bots``; names are unique within a bot."""
    if not bots:
        return []
    end_ms = end_ms if end_ms is not None else now_ms()

    workers = []
    names_per_bot = {}
    for i in range(count):
        bot = rng.choice(bots)
        taken = names_per_bot.setdefault(bot["id"], set())
        name = f"{rng.choice(WORKER_TYPES)} {len(taken) + 1}"
        while name in taken:
            name = f"{name}-{i}"
        taken.add(name)

        workers.append({
            "id": new_record_id(),
            "name": name,
            "description": rng.choice(WORKER_DESCRIPTIONS) if rng.random() > 0.1 else None,
            "bot": bot["id"],
            # A worker never predates its bot
            "created": _random_created(rng, bot["created"], end_ms),
        })
    return workers


def generate_logs(workers, min_per_worker: int, max_per_worker: int, rng: random.Random, end_ms: int = None):
    """Generate between ``min_per_worker`` and ``max_per_worker`` logs for every worker."""
    end_ms = end_ms if end_ms is not None else now_ms()

    logs = []
    for worker in workers:
        for _ in range(rng.randint(min_per_worker, max(min_per_worker, max_per_worker))):
            template = rng.choice(LOG_MESSAGES)
            logs.append({
                "id": new_record_id(),
                "message": template.format(n=rng.randint(1, 500)),
                "bot": worker["bot"],
                "worker": worker["id"],
                "created": _random_created(rng, worker["created"], end_ms),
            })
    return logs


def write_collection(output_dir: Path, name: str, records) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{name}.json"
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(records, fh, indent=2)
    logger.log_operation("seed.write", "success", {"collection": name, "records": len(records), "path": str(path)})
    return path


def generate_all(output_dir: Path, bots: int, workers: int, min_logs: int, max_logs: int, seed: int = None):
    rng = random.Random(seed)
    end_ms = now_ms()

    bot_records = generate_bots(bots, rng, end_ms)
    worker_records = generate_workers(workers, bot_records, rng, end_ms)
    log_records = generate_logs(worker_records, min_logs, max_logs, rng, end_ms)

    write_collection(output_dir, "bots", bot_records)
    write_collection(output_dir, "workers", worker_records)
    write_collection(output_dir, "logs", log_records)
    return {"bots": len(bot_records), "workers": len(worker_records), "logs": len(log_records)}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate BotCRUD seed data")
    parser.add_argument("--bots", type=int, default=50, help="Number of bots (default: 50)")
    parser.add_argument("--workers", type=int, default=200, help="Number of workers (default: 200)")
    parser.add_argument("--min-logs", type=int, default=5, help="Minimum logs per worker (default: 5)")
    parser.add_argument("--max-logs", type=int, default=50, help="Maximum logs per worker (default: 50)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible output")
    parser.add_argument("--output-dir", default=None, help="Output directory (default: DATA_DIR)")

    args = parser.parse_args(argv)

    if args.min_logs < 0 or args.max_logs < args.min_logs:
        parser.error("--max-logs must be >= --min-logs >= 0")

    output_dir = Path(args.output_dir) if args.output_dir else get_data_dir()
    counts = generate_all(output_dir, args.bots, args.workers, args.min_logs, args.max_logs, args.seed)

    print(f"✅ Seed data written to {output_dir}")
    for name, count in counts.items():
        print(f"   {name}: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
