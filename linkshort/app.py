"""Command-line entry point that wires the service together and serves it."""

from __future__ import annotations

import argparse
import os

import redis

from .cached_repository import CachedRepository
from .database import DBType, setup_db
from .handler import Handler
from .inmemory import InMemoryRepository
from .logs import get_logger, setup_logger
from .redis_cache import RedisCache
from .router import create_app
from .server import start
from .service import ShortenerService

DEFAULT_PORT = ":8080"
DEFAULT_MONGO_URI = "mongodb://localhost:27017"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser; defaults come from the environment."""
    parser = argparse.ArgumentParser(
        prog="linkshort", description="Run the URL shortener HTTP service."
    )
    parser.add_argument(
        "--port",
        default=os.environ.get("PORT", DEFAULT_PORT),
        help="address to listen on, such as :8080",
    )
    parser.add_argument(
        "--db",
        choices=[DBType.MONGO.value, DBType.MEMORY.value],
        default=DBType.MONGO.value,
        help="storage back end",
    )
    parser.add_argument(
        "--mongo-uri",
        default=os.environ.get("MONGO_URI", DEFAULT_MONGO_URI),
        help="MongoDB connection URI",
    )
    parser.add_argument(
        "--redis-url",
        default=os.environ.get("REDIS_URL", DEFAULT_REDIS_URL),
        help="Redis connection URL",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Start the shortener and serve until interrupted; return the exit status."""
    args = build_parser().parse_args(argv)
    print("Starting URL Shortener!")
    setup_logger()
    log = get_logger()

    try:
        repo, cleanup = setup_db(args.db, mongo_uri=args.mongo_uri)
    except ConnectionError as exc:
        log.error("Failed to get database repo: %s", exc)
        repo, cleanup = InMemoryRepository(), None

    client = None
    try:
        client = redis.Redis.from_url(args.redis_url)
        client.ping()
    except (redis.exceptions.RedisError, ValueError) as exc:
        log.error("Failed to get redis client: %s", exc)
        if client is not None:
            client.close()
        if cleanup is not None:
            cleanup()
        return 1

    try:
        repository = CachedRepository(repo, RedisCache(client))
        handler = Handler(ShortenerService(repository))
        start(create_app(handler), args.port, cleanup)
    except (OSError, ValueError) as exc:
        log.error("Server error: %s", exc)
        return 1
    finally:
        client.close()
    return 0