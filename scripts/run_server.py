#!/usr/bin/env python3
"""
BotCRUD API server.

Loads the bots, workers and logs collections from the data directory and
serves them over HTTP.
"""

import argparse
import sys
from pathlib import Path

# Add the parent directory to sys.path to import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from botcrud.api.main import create_app
from botcrud.core.config import HOST, PORT, get_data_dir, validate_config
from botcrud.core.datastore import CollectionStore
from util.logging import logger


def build_store(data_dir: Path) -> CollectionStore:
    store = CollectionStore(data_dir)
    store.initialize()
    return store


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the BotCRUD API server")
    parser.add_argument("--host", default=HOST, help=f"Bind address (default: {HOST})")
    parser.add_argument("--port", type=int, default=PORT, help=f"Port (default: {PORT})")
    parser.add_argument("--data-dir", default=None, help="Directory holding bots.json, workers.json and logs.json")

    args = parser.parse_args(argv)

    issues = validate_config()
    if issues:
        for issue in issues:
            logger.error(f"Configuration issue: {issue}")
        print("❌ Invalid configuration:")
        for issue in issues:
            print(f"   - {issue}")
        return 1

    data_dir = Path(args.data_dir) if args.data_dir else get_data_dir()
    store = build_store(data_dir)
    app = create_app(store)

    print(f"🚀 BotCRUD API listening on http://{args.host}:{args.port}")
    print(f"   Data directory: {data_dir}")
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
