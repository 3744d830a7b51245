"""Choosing and connecting the storage back end for URL records."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pymongo import MongoClient
from pymongo.errors import CollectionInvalid, OperationFailure, PyMongoError

from .inmemory import InMemoryRepository
from .logs import get_logger
from .mongo_repository import MongoRepository
from .postgres_repository import PostgresRepository
from .repository import URLRepository

DATABASE_NAME = "url_shortener_db"
COLLECTION_NAME = "urls"
NAMESPACE_EXISTS = 48
MAX_POOL_SIZE = 10
CONNECT_TIMEOUT_MS = 10_000

URL_VALIDATOR = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["original_url", "short_url", "created_at"],
        "properties": {
            "original_url": {
                "bsonType": "string",
                "description": "must be a string and is required",
            },
            "short_url": {
                "bsonType": "string",
                "description": "must be a string and is required",
            },
            "custom_url": {
                "bsonType": ["string", "null"],
                "description": "optional string",
            },
            "expiration_date": {
                "bsonType": ["date", "null"],
                "description": "optional expiration date",
            },
            "created_at": {
                "bsonType": "date",
                "description": "must be a date and is required",
            },
        },
    }
}


class DBType(str, Enum):
    """The kind of storage back end."""

    MONGO = "mongodb"
    SQL = "sql"
    MEMORY = "memory"


def create_collection_with_validation(db: Any) -> None:
    """Create the URL collection with its schema; an existing one is kept."""
    try:
        db.create_collection(COLLECTION_NAME, validator=URL_VALIDATOR)
    except CollectionInvalid:
        print("Collection already exists. Skipping creation.")
    except OperationFailure as exc:
        if exc.code != NAMESPACE_EXISTS:
            raise RuntimeError(f"creating collection: {exc}") from exc
        print("Collection already exists. Skipping creation.")
    else:
        print("Collection created with schema validation.")


def create_indexes(collection: Any) -> None:
    """Create the unique index on ``short_url``."""
    try:
        collection.create_index([("short_url", 1)], unique=True)
    except PyMongoError as exc:
        raise RuntimeError(f"Creating index {exc}") from exc


def init_mongo(uri: str) -> Any:
    """Connect to MongoDB and create the database, collection and index if missing."""
    print("MongoDB starting up......")
    log = get_logger()
    client = MongoClient(
        uri, maxPoolSize=MAX_POOL_SIZE, serverSelectionTimeoutMS=CONNECT_TIMEOUT_MS
    )
    try:
        client.admin.command("ping")
    except PyMongoError:
        client.close()
        raise

    try:
        names = [db["name"] for db in client.list_databases(filter={"name": DATABASE_NAME})]
    except PyMongoError:
        log.warning("failed to list mongodb databases")
        names = []

    log.info("Checking if mongodb databases are setup")
    if DATABASE_NAME in names:
        return client

    log.info("Setting up indexes and database for url shortener")
    db = client[DATABASE_NAME]
    create_collection_with_validation(db)
    create_indexes(db[COLLECTION_NAME])
    return client


def setup_db(
    db_type: DBType | str,
    mongo_uri: str = "",
    sql_connect: Callable[[], Any] | None = None,
) -> tuple[URLRepository, Callable[[], None] | None]:
    """Return a repository for ``db_type`` and a cleanup function, or None for memory.

    ``sql_connect`` returns a DB-API connection to PostgreSQL; any other type
    than MongoDB or SQL gives the in-memory repository.
    """
    if db_type == DBType.MONGO:
        try:
            client = init_mongo(mongo_uri)
        except PyMongoError as exc:
            raise ConnectionError(f"mongo connection failed: {exc}") from exc

        def close_mongo() -> None:
            print("Shutting down mongo!")
            try:
                client.close()
            except PyMongoError as exc:
                get_logger().error("Mongo disconnect failed: %s", exc)

        return MongoRepository(client[DATABASE_NAME][COLLECTION_NAME]), close_mongo

    if db_type == DBType.SQL:
        if sql_connect is None:
            raise ConnectionError("sql connection failed: no connect function given")
        try:
            connection = sql_connect()
        except Exception as exc:
            raise ConnectionError(f"sql connection failed: {exc}") from exc

        def close_sql() -> None:
            print("Shutting down Postgres!")
            try:
                connection.close()
            except Exception as exc:
                get_logger().error("sql disconnect failed: %s", exc)

        return PostgresRepository(connection), close_sql

    return InMemoryRepository(), None