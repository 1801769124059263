# hackreg/data_client/team_store.py
"""
Team collection access.

Save-time invariants (checked in `insert_team` before writing):
- len(members) == num_teammates
- no member is already referenced by another team

Reads return raw documents; `populate_members` swaps the member ObjectIds
for the full user documents, like the dashboard expects.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from hackreg.data_client import user_store
from hackreg.data_client.mongo import TEAMS
from hackreg.errors import DuplicateMember, TeamInvariantViolated
from hackreg.models import TeamDocument
from hackreg.utils import substring_filter, utc_now

logger = logging.getLogger("hackreg.team_store")


async def _check_invariants(db, team: TeamDocument, exclude_id: Any = None) -> None:
    if len(team.members) != team.num_teammates:
        raise TeamInvariantViolated("Number of team members must match num_teammates")

    query: Dict[str, Any] = {"members": {"$in": list(team.members)}}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    clash = await db[TEAMS].find_one(query, {"team_id": 1})
    if clash:
        raise TeamInvariantViolated(
            "One or more team members are already registered with another team"
        )


async def insert_team(db, team: TeamDocument) -> Dict[str, Any]:
    """Validate invariants, insert, and return the stored document."""
    await _check_invariants(db, team)

    now = utc_now()
    doc = team.model_dump()
    doc["createdAt"] = now
    doc["updatedAt"] = now
    try:
        result = await db[TEAMS].insert_one(doc)
    except DuplicateKeyError:
        raise DuplicateMember(f"A team with id '{team.team_id}' already exists.")
    doc["_id"] = result.inserted_id
    logger.debug("Inserted team %s with %d member(s)", team.team_id, len(team.members))
    return doc


async def populate_members(db, team: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(team)
    out["members"] = await user_store.get_many(db, team.get("members") or [])
    return out


async def get_team(db, team_id: str, populate: bool = True) -> Optional[Dict[str, Any]]:
    team = await db[TEAMS].find_one({"team_id": team_id})
    if team is None or not populate:
        return team
    return await populate_members(db, team)


async def search_teams(db, search: Optional[str] = None, theme: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Dashboard listing.
    - search: case-insensitive substring of team_name OR team_id
    - theme: exact theme value
    """
    query: Dict[str, Any] = {}
    if theme:
        query["theme"] = theme
    if search:
        query["$or"] = [
            {"team_name": substring_filter(search)},
            {"team_id": substring_filter(search)},
        ]

    teams = await db[TEAMS].find(query, sort=[("createdAt", DESCENDING)]).to_list(length=None)
    return [await populate_members(db, t) for t in teams]


async def update_team(db, team_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Apply a partial `$set` and return the populated team, or None."""
    changes = dict(changes)
    changes["updatedAt"] = utc_now()
    updated = await db[TEAMS].find_one_and_update(
        {"team_id": team_id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        return None
    return await populate_members(db, updated)


async def delete_team(db, team_id: str) -> Optional[Dict[str, Any]]:
    """Remove the team document only; callers cascade to the participants."""
    return await db[TEAMS].find_one_and_delete({"team_id": team_id})


async def count_teams(db) -> int:
    return await db[TEAMS].count_documents({})
