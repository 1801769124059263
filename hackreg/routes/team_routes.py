# hackreg/routes/team_routes.py
"""Dashboard team APIs: list/search, detail, partial update, delete.

Every route requires a valid admin session.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from hackreg.data_client import team_store, user_store
from hackreg.deps import get_db
from hackreg.errors import NotFound, ValidationFailed
from hackreg.metrics import TEAMS_DELETED
from hackreg.models import THEMES, TeamUpdate
from hackreg.session import require_admin
from hackreg.utils import to_jsonable

logger = logging.getLogger("hackreg")

router = APIRouter(prefix="/api/teams", tags=["teams"], dependencies=[Depends(require_admin)])


def _normalize_param(value: Optional[str]) -> Optional[str]:
    """None, "" or whitespace => None, else stripped string."""
    if value is None:
        return None
    v = value.strip()
    return v if v else None


@router.get("")
async def list_teams(
    search: Optional[str] = Query(default=None),
    theme: Optional[str] = Query(default=None),
    db=Depends(get_db),
):
    search = _normalize_param(search)
    theme = _normalize_param(theme)
    if theme is not None and theme not in THEMES:
        raise ValidationFailed(f"Invalid theme '{theme}'")

    teams = await team_store.search_teams(db, search=search, theme=theme)
    return to_jsonable(teams)


@router.get("/{team_id}")
async def get_team(team_id: str, db=Depends(get_db)):
    team = await team_store.get_team(db, team_id)
    if team is None:
        raise NotFound("Team not found")
    return to_jsonable(team)


@router.patch("/{team_id}")
async def update_team(team_id: str, body: TeamUpdate, db=Depends(get_db)):
    """
    Partial update, e.g. attaching submission URLs:
      {"abstract_submission": "https://..."}
    """
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationFailed("No updatable fields provided")
    if any(v is None for k, v in changes.items() if k not in ("abstract_submission", "project_submission")):
        raise ValidationFailed("Only submission links can be cleared")

    team = await team_store.update_team(db, team_id, changes)
    if team is None:
        raise NotFound("Team not found")
    logger.info("Team %s updated: %s", team_id, ", ".join(sorted(changes)))
    return to_jsonable(team)


@router.delete("/{team_id}")
async def delete_team(team_id: str, db=Depends(get_db)):
    """
    Delete the team, then its participants.
    If the second step fails the team is already gone (not compensated).
    """
    deleted = await team_store.delete_team(db, team_id)
    if deleted is None:
        raise NotFound("Team not found")

    try:
        removed = await user_store.delete_participants_of_team(db, team_id)
    except Exception as exc:
        logger.error("Team %s deleted but its participants were not: %s", team_id, exc)
        raise

    TEAMS_DELETED.inc()
    logger.info("Team %s deleted with %d participant(s)", team_id, removed)
    return {
        "message": "Team and associated participants successfully deleted",
        "deletedTeam": to_jsonable(deleted),
        "deletedParticipants": removed,
    }
