"""MongoDB connection management and collection helpers."""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database


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
        db_name = os.getenv("MONGODB_DATABASE", "career_coach")
        _database = client[db_name]
    return _database


def get_collection(name: str) -> Collection:
    return get_database()[name]


def serialize_document(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Replace Mongo's ObjectId with a string ``id`` so the document is JSON friendly."""
    if document is None:
        return None
    serialized = dict(document)
    object_id = serialized.pop("_id", None)
    if object_id is not None:
        serialized["id"] = str(object_id)
    return serialized


def create_indexes():
    """Create the indexes the result stores rely on for ownership and lookups."""
    db = get_database()

    db.users.create_index("subject", unique=True)
    db.industry_insights.create_index("industry", unique=True)

    # Letters are listed newest first, assessments oldest first.
    db.cover_letters.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
    db.assessments.create_index([("user_id", ASCENDING), ("created_at", ASCENDING)])

    db.sessions.create_index("token", unique=True)
    db.verification_codes.create_index("code")
