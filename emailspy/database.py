"""MongoDB database configuration and connection management."""

from __future__ import annotations

import os
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

RESULTS_COLLECTION = "email_results"
RATE_LIMITS_COLLECTION = "rate_limits"

# Global MongoDB client instance
_client: Optional[MongoClient] = None
_database: Optional[Database] = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client instance."""
    global _client
    if _client is None:
        mongo_uri = os.getenv("MONGODB_URI", "mongodb://localhost:27017/")
        _client = MongoClient(mongo_uri)
    return _client


def get_database() -> Database:
    """Get the MongoDB database instance."""
    global _database
    if _database is None:
        client = get_mongo_client()
        db_name = os.getenv("MONGODB_DATABASE", "emailspy")
        _database = client[db_name]
    return _database


def create_indexes() -> None:
    """Create the unique lookup indexes used by the relay and rate limiter."""
    db = get_database()
    db[RESULTS_COLLECTION].create_index([("callback_id", ASCENDING)], unique=True)
    db[RESULTS_COLLECTION].create_index([("received_at", ASCENDING)])
    db[RATE_LIMITS_COLLECTION].create_index([("session_id", ASCENDING)], unique=True)
    db[RATE_LIMITS_COLLECTION].create_index([("window_start", ASCENDING)])


def close_mongo_connection() -> None:
    """Close the MongoDB client and forget the cached database handle."""
    global _client, _database
    if _client is not None:
        _client.close()
    _client = None
    _database = None
