# hackreg/utils.py
"""
Utility helpers used across the backend.

Goals:
- Generate public identifiers for users and teams
- Turn MongoDB documents into JSON-safe dicts (ObjectId, datetime)
- Build safe regex filters from free-text search input
- Redact personal data before it reaches the logs
"""

from __future__ import annotations

import datetime as _dt
import re
import uuid
from typing import Any, Dict, List

from bson import ObjectId


# ----------------------------------------------------------------------
# 1) Identifiers
# ----------------------------------------------------------------------
def new_user_id() -> str:
    """Public user id, e.g. UID5F3A9C21B0."""
    return "UID" + uuid.uuid4().hex[:10].upper()


def new_team_id() -> str:
    """Public team id, e.g. TID8E02B1D4."""
    return "TID" + uuid.uuid4().hex[:8].upper()


def utc_now() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


# ----------------------------------------------------------------------
# 2) JSON conversion for Mongo documents
# ----------------------------------------------------------------------
def to_jsonable(value: Any) -> Any:
    """
    Recursively convert a Mongo document (or list of them) so that
    FastAPI can serialise it: ObjectId -> str, datetime -> ISO 8601.
    """
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, _dt.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=_dt.timezone.utc)
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


# ----------------------------------------------------------------------
# 3) Search helpers
# ----------------------------------------------------------------------
def substring_filter(text: str) -> Dict[str, str]:
    """
    Case-insensitive literal substring match as a Mongo `$regex` filter.
    The user's text is escaped: `a.b` matches "a.b", not "axb".
    """
    return {"$regex": re.escape(text), "$options": "i"}


# ----------------------------------------------------------------------
# 4) Messages
# ----------------------------------------------------------------------
def describe_validation_error(exc) -> str:
    """Flatten a pydantic ValidationError (or FastAPI RequestValidationError) into one sentence."""
    parts: List[str] = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x != "body")
        msg = err.get("msg", "invalid value")
        # pydantic prefixes custom ValueError messages
        msg = msg.replace("Value error, ", "")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid input"


# ----------------------------------------------------------------------
# 5) Log redaction
# ----------------------------------------------------------------------
def mask_email(email: str) -> str:
    local, _, domain = (email or "").partition("@")
    if not domain:
        return "***"
    return f"{local[:1]}***@{domain}"


def mask_contact(contact: str) -> str:
    contact = contact or ""
    return f"******{contact[-4:]}" if len(contact) >= 4 else "***"


__all__ = [
    "new_user_id",
    "new_team_id",
    "utc_now",
    "to_jsonable",
    "substring_filter",
    "describe_validation_error",
    "mask_email",
    "mask_contact",
]
