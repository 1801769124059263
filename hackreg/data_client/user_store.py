# hackreg/data_client/user_store.py
"""User collection access.

All functions take the database handle explicitly; nothing here caches a
connection.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from hackreg.data_client.mongo import USERS
from hackreg.errors import DuplicateMember
from hackreg.models import Role, UserDocument
from hackreg.utils import utc_now

logger = logging.getLogger("hackreg.user_store")


async def find_by_email_or_contact(db, email: str, contact: str) -> Optional[Dict[str, Any]]:
    return await db[USERS].find_one({"$or": [{"email": email}, {"contact": contact}]})


async def insert_user(db, user: UserDocument) -> ObjectId:
    """
    Insert a validated user and return its document `_id`.

    A unique-index violation (email, contact or user_id taken by a
    concurrent request) is reported the same way as the upfront check.
    """
    now = utc_now()
    doc = user.model_dump()
    doc["createdAt"] = now
    doc["updatedAt"] = now
    try:
        result = await db[USERS].insert_one(doc)
    except DuplicateKeyError:
        raise DuplicateMember("A user with the provided email or contact already exists.")
    return result.inserted_id


async def find_admin(db, name: str, contact: str) -> Optional[Dict[str, Any]]:
    return await db[USERS].find_one({"name": name, "contact": contact, "role": Role.ADMIN.value})


async def get_by_object_id(db, oid: Any) -> Optional[Dict[str, Any]]:
    """Fetch by `_id`; a malformed id is simply "not found"."""
    try:
        key = oid if isinstance(oid, ObjectId) else ObjectId(str(oid))
    except (InvalidId, TypeError):
        return None
    return await db[USERS].find_one({"_id": key})


async def get_many(db, ids: Iterable[Any]) -> List[Dict[str, Any]]:
    """
    Fetch users by `_id`, returned in the order of `ids`.
    Ids that no longer resolve are skipped (populate semantics).
    """
    ids = list(ids)
    if not ids:
        return []
    found = await db[USERS].find({"_id": {"$in": ids}}).to_list(length=None)
    by_id = {d["_id"]: d for d in found}
    return [by_id[i] for i in ids if i in by_id]


async def delete_participants_of_team(db, team_id: str) -> int:
    result = await db[USERS].delete_many({"team_id": team_id, "role": Role.PARTICIPANT.value})
    return result.deleted_count


async def delete_by_ids(db, ids: List[ObjectId]) -> int:
    if not ids:
        return 0
    result = await db[USERS].delete_many({"_id": {"$in": ids}})
    return result.deleted_count


async def count_participants(db) -> int:
    return await db[USERS].count_documents({"role": Role.PARTICIPANT.value})


async def create_admin(db, admin: UserDocument) -> ObjectId:
    """Insert a pre-validated admin user (seeding)."""
    if admin.role != Role.ADMIN.value:
        raise ValueError("create_admin expects role=admin")
    existing = await find_by_email_or_contact(db, admin.email, admin.contact)
    if existing:
        raise DuplicateMember("A user with the provided email or contact already exists.")
    oid = await insert_user(db, admin)
    logger.info("Admin account created: %s", admin.user_id)
    return oid
