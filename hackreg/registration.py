# hackreg/registration.py
"""
Team registration workflow.

Steps for one POST /api/register:
1) check the team descriptor (required fields, theme, size, leader is a member)
2) for each member, in order: required fields, field formats, email/contact
   not already taken
3) insert one participant user per member
4) insert the team referencing those users (team_store enforces the roster
   invariants)

MongoDB gives us no multi-document transaction here (standalone servers
don't support them), so if anything fails after the first user insert the
users created by *this* request are deleted again before the error goes
back to the client. Best effort: a crash between the two writes can still
leave orphans.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from bson import ObjectId
from pydantic import ValidationError

from hackreg.data_client import team_store, user_store
from hackreg.errors import DuplicateMember, ValidationFailed
from hackreg.metrics import REGISTRATION_LATENCY, REGISTRATIONS
from hackreg.models import (
    MAX_TEAM_SIZE,
    MIN_TEAM_SIZE,
    THEMES,
    Gender,
    MemberData,
    RegisterRequest,
    Role,
    TeamData,
    TeamDocument,
    UserDocument,
)
from hackreg.utils import describe_validation_error, mask_contact, mask_email, new_team_id, new_user_id

logger = logging.getLogger("hackreg.registration")

_MEMBER_FIELDS = ("name", "email", "contact", "college", "stream", "year", "gender")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# ---------------------------------------------------------------------
# Step 1: team descriptor
# ---------------------------------------------------------------------
def validate_team_data(req: RegisterRequest) -> Tuple[TeamData, List[MemberData]]:
    team, members = req.teamData, req.memberData
    if team is None or members is None:
        raise ValidationFailed("Missing required fields")

    if (
        _is_blank(team.teamName)
        or _is_blank(team.teamLeader)
        or not team.numTeammates
        or _is_blank(team.theme)
        or len(members) == 0
    ):
        raise ValidationFailed("Missing required fields in teamData or memberData")

    theme = team.theme.strip()
    if theme not in THEMES:
        raise ValidationFailed(f"Invalid theme '{theme}'. Expected one of: {', '.join(THEMES)}")

    if not MIN_TEAM_SIZE <= team.numTeammates <= MAX_TEAM_SIZE:
        raise ValidationFailed(
            f"Number of teammates must be between {MIN_TEAM_SIZE} and {MAX_TEAM_SIZE}"
        )

    leader = team.teamLeader.strip()
    if not any(isinstance(m.name, str) and m.name.strip() == leader for m in members):
        raise ValidationFailed("Team leader must be one of the team members")

    return team, members


# ---------------------------------------------------------------------
# Step 2: one member
# ---------------------------------------------------------------------
def build_participant(member: MemberData, team_id: str) -> UserDocument:
    """Turn a submitted member into a validated participant document."""
    label = member.name.strip() if isinstance(member.name, str) and member.name.strip() else "unknown"

    if any(_is_blank(getattr(member, f)) for f in _MEMBER_FIELDS):
        raise ValidationFailed(f"Missing fields for member: {label}")

    try:
        return UserDocument(
            user_id=new_user_id(),
            team_id=team_id,
            name=member.name,
            email=member.email,
            contact=member.contact,
            college=member.college,
            stream=member.stream,
            year=member.year,
            gender=member.gender,
            role=Role.PARTICIPANT,
        )
    except ValidationError as exc:
        raise ValidationFailed(f"Invalid data for member {label}: {describe_validation_error(exc)}")


async def _ensure_unique(db, user: UserDocument) -> None:
    existing = await user_store.find_by_email_or_contact(db, user.email, user.contact)
    if existing:
        logger.info(
            "Duplicate member rejected (email=%s contact=%s)",
            mask_email(user.email),
            mask_contact(user.contact),
        )
        raise DuplicateMember("A user with the provided email or contact already exists.")


# ---------------------------------------------------------------------
# Step 4: team document
# ---------------------------------------------------------------------
def build_team(team_id: str, team: TeamData, users: List[UserDocument], member_ids: List[ObjectId]) -> TeamDocument:
    num_males = team.numMales
    num_females = team.numFemales
    # The form sends the counts; derive them when a client doesn't.
    if num_males is None:
        num_males = sum(1 for u in users if u.gender == Gender.MALE.value)
    if num_females is None:
        num_females = sum(1 for u in users if u.gender == Gender.FEMALE.value)

    try:
        return TeamDocument(
            team_id=team_id,
            team_name=team.teamName,
            num_teammates=team.numTeammates,
            num_males=num_males,
            num_females=num_females,
            theme=team.theme,
            members=member_ids,
        )
    except ValidationError as exc:
        raise ValidationFailed(f"Invalid team data: {describe_validation_error(exc)}")


async def _rollback_users(db, created: List[ObjectId], team_id: str) -> None:
    if not created:
        return
    try:
        removed = await user_store.delete_by_ids(db, created)
        logger.warning("Registration of %s aborted: removed %d user(s) created by it", team_id, removed)
    except Exception as exc:
        logger.error("Registration of %s aborted and cleanup failed, %d orphan user(s): %s", team_id, len(created), exc)


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------
async def register_team(db, req: RegisterRequest) -> Tuple[str, Dict[str, Any]]:
    """
    Run the full workflow and return (team_id, populated team document).
    Raises a PortalError subclass on any rejection.
    """
    with REGISTRATION_LATENCY.time():
        try:
            team_id, team = await _register(db, req)
        except Exception as exc:
            REGISTRATIONS.labels(outcome=type(exc).__name__).inc()
            raise
    REGISTRATIONS.labels(outcome="success").inc()
    return team_id, team


async def _register(db, req: RegisterRequest) -> Tuple[str, Dict[str, Any]]:
    team_data, members = validate_team_data(req)

    team_id = (req.teamId or "").strip() or new_team_id()
    if await team_store.get_team(db, team_id, populate=False):
        raise DuplicateMember(f"A team with id '{team_id}' already exists.")

    users: List[UserDocument] = []
    created: List[ObjectId] = []
    try:
        for member in members:
            user = build_participant(member, team_id)
            await _ensure_unique(db, user)
            created.append(await user_store.insert_user(db, user))
            users.append(user)

        team = build_team(team_id, team_data, users, created)
        stored = await team_store.insert_team(db, team)
    except Exception:
        await _rollback_users(db, created, team_id)
        raise

    logger.info("Team %s (%s) registered with %d member(s)", team_id, team_data.teamName, len(created))
    return team_id, await team_store.populate_members(db, stored)
