import re
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


# ─────────────────────────────────────────────────────────────
# Closed value sets
# ─────────────────────────────────────────────────────────────

class Theme(str, Enum):
    THEME_1 = "Theme 1"
    THEME_2 = "Theme 2"
    THEME_3 = "Theme 3"
    THEME_4 = "Theme 4"
    THEME_5 = "Theme 5"
    THEME_6 = "Theme 6"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Role(str, Enum):
    PARTICIPANT = "participant"
    ADMIN = "admin"


THEMES = [t.value for t in Theme]

CONTACT_RE = re.compile(r"^[0-9]{10}$")

MIN_TEAM_SIZE = 2
MAX_TEAM_SIZE = 4


# ─────────────────────────────────────────────────────────────
# Persisted documents (field-level validation before insert)
# ─────────────────────────────────────────────────────────────

class UserDocument(BaseModel):
    """
    A person record stored in the `users` collection.

    Participants always carry the `team_id` of the team they registered
    with; admins are seeded without one.
    """
    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True, validate_default=True)

    user_id: str = Field(..., min_length=1)
    team_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    gender: Gender
    email: EmailStr
    contact: str
    college: str = Field(..., min_length=1)
    stream: str = Field(..., min_length=1)
    year: int = Field(..., ge=1)
    role: Role = Role.PARTICIPANT

    @field_validator("gender", "role", mode="before")
    @classmethod
    def _lowercase_enum(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("contact", mode="before")
    @classmethod
    def _check_contact(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)
        if isinstance(v, str):
            v = v.strip()
            if not CONTACT_RE.match(v):
                raise ValueError("Please enter a valid 10-digit contact number")
        return v

    @model_validator(mode="after")
    def _team_required_for_participants(self) -> "UserDocument":
        if self.role == Role.PARTICIPANT.value and not self.team_id:
            raise ValueError("team_id is required for participants")
        return self


class TeamDocument(BaseModel):
    """A registered team stored in the `teams` collection."""
    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    team_id: str = Field(..., min_length=1)
    team_name: str = Field(..., min_length=1)
    num_teammates: int = Field(..., ge=MIN_TEAM_SIZE, le=MAX_TEAM_SIZE)
    num_males: int = Field(..., ge=0)
    num_females: int = Field(..., ge=0)
    theme: Theme
    # ObjectId references into `users`, in submission order
    members: List[Any] = Field(default_factory=list)
    abstract_submission: Optional[str] = None
    project_submission: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Requests (camelCase, as posted by the registration form)
# ─────────────────────────────────────────────────────────────

class TeamData(BaseModel):
    teamName: Optional[str] = None
    teamLeader: Optional[str] = None
    numTeammates: Optional[int] = None
    numMales: Optional[int] = None
    numFemales: Optional[int] = None
    theme: Optional[str] = None


class MemberData(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    contact: Optional[Union[str, int]] = None
    college: Optional[str] = None
    stream: Optional[str] = None
    year: Optional[Union[int, str]] = None
    gender: Optional[str] = None


class RegisterRequest(BaseModel):
    """
    Request used by POST /api/register.
    `teamId` is generated server-side when the client does not send one.
    """
    teamId: Optional[str] = None
    teamData: Optional[TeamData] = None
    memberData: Optional[List[MemberData]] = None


class AdminLogin(BaseModel):
    name: Optional[str] = None
    contact: Optional[Union[str, int]] = None


class TeamUpdate(BaseModel):
    """
    Partial update for PATCH /api/teams/{id}.

    Roster fields (members, num_teammates, team_id) are not updatable:
    the roster is fixed at registration.
    """
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, use_enum_values=True)

    team_name: Optional[str] = Field(default=None, min_length=1)
    theme: Optional[Theme] = None
    num_males: Optional[int] = Field(default=None, ge=0)
    num_females: Optional[int] = Field(default=None, ge=0)
    abstract_submission: Optional[str] = None
    project_submission: Optional[str] = None
