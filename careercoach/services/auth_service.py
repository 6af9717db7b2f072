"""Workspace codes and bearer sessions.

A workspace code is the identity subject of the user it logs in: issuing a
code reserves that subject, and redeeming it proves the caller holds it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pymongo import ReturnDocument

from careercoach import database


def issue_code(code: str, expires_at: int) -> None:
    """Store ``code`` as redeemable until ``expires_at`` (UNIX seconds).

    Re-issuing an existing code resets its expiry and makes it redeemable again.
    """
    collection = database.get_collection("verification_codes")
    collection.update_one(
        {"code": code},
        {
            "$set": {"expires_at": expires_at, "used": False},
            "$setOnInsert": {"created_at": datetime.utcnow()},
        },
        upsert=True,
    )


def redeem_code(code: str, now: int) -> bool:
    """Consume a live code; False when it is unknown, expired or already used."""
    collection = database.get_collection("verification_codes")
    record = collection.find_one_and_update(
        {"code": code, "used": False, "expires_at": {"$gt": now}},
        {"$set": {"used": True, "used_at": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
    return record is not None


def open_session(token: str, subject: str, expires_at: int) -> None:
    collection = database.get_collection("sessions")
    collection.insert_one(
        {
            "token": token,
            "subject": subject,
            "expires_at": expires_at,
            "created_at": datetime.utcnow(),
        }
    )


def find_session(token: str) -> Optional[Dict[str, Any]]:
    collection = database.get_collection("sessions")
    return database.serialize_document(collection.find_one({"token": token}))


def close_session(token: str) -> bool:
    """Revoke a session; False when the token was unknown."""
    collection = database.get_collection("sessions")
    return collection.delete_one({"token": token}).deleted_count > 0


def purge_expired(now: int) -> Dict[str, int]:
    """Delete spent or expired codes and expired sessions, returning the counts."""
    codes = database.get_collection("verification_codes").delete_many(
        {"$or": [{"expires_at": {"$lte": now}}, {"used": True}]}
    )
    sessions = database.get_collection("sessions").delete_many({"expires_at": {"$lte": now}})
    return {"codes": codes.deleted_count, "sessions": sessions.deleted_count}
