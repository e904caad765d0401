"""
Database Helper Functions

MongoDB connection handling shared by the query driver, the seeder and the API.
Nothing here opens a client at import time; callers build one through
get_client() or connect().

Connection settings come from the environment (a local .env file is loaded
first when present):

- MONGODB_URI        connection string (default mongodb://localhost:27017)
- DATABASE_NAME      database name (default plp_bookstore)
- COLLECTION_NAME    books collection name (default books)
- MONGODB_TIMEOUT_MS server selection timeout in milliseconds (optional)
"""

import os
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from dotenv import load_dotenv
from pymongo import MongoClient, uri_parser
from pymongo.collection import Collection

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_URI = "mongodb://localhost:27017"
DEFAULT_DATABASE = "plp_bookstore"
DEFAULT_COLLECTION = "books"

DATABASE_URL = os.getenv("MONGODB_URI", DEFAULT_URI)
DATABASE_NAME = os.getenv("DATABASE_NAME", DEFAULT_DATABASE)
COLLECTION_NAME = os.getenv("COLLECTION_NAME", DEFAULT_COLLECTION)


def get_client(uri: Optional[str] = None) -> MongoClient:
    """Build a client. pymongo does not connect until the first operation."""
    kwargs = {}
    timeout = os.getenv("MONGODB_TIMEOUT_MS")
    if timeout:
        kwargs["serverSelectionTimeoutMS"] = int(timeout)
    return MongoClient(uri or DATABASE_URL, **kwargs)


@contextmanager
def connect(uri: Optional[str] = None, client_factory=get_client) -> Iterator[MongoClient]:
    """Open one client for the duration of the block and close it on every exit path."""
    target = uri or DATABASE_URL
    client = client_factory(target)
    try:
        logger.info("Opened MongoDB client for %s", hosts(target))
        yield client
    finally:
        client.close()
        logger.info("MongoDB client closed")


def books_collection(client: MongoClient, database_name: Optional[str] = None,
                     collection_name: Optional[str] = None) -> Collection:
    return client[database_name or DATABASE_NAME][collection_name or COLLECTION_NAME]


def hosts(uri: str) -> str:
    """Host list of a connection string, without credentials or options."""
    return ",".join(f"{host}:{port}" for host, port in uri_parser.parse_uri(uri)["nodelist"])
