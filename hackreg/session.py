# hackreg/session.py
"""
Admin session cookie.

The cookie value is a signed, timestamped token (itsdangerous) wrapping
the admin's Mongo `_id`. `require_admin` is the FastAPI dependency that
gates the dashboard APIs: bad signature, expired token or an id that no
longer resolves to an admin all end up as 401.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import Depends, Request, Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from hackreg.config import (
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    SESSION_MAX_AGE_SECONDS,
    SESSION_SECRET,
)
from hackreg.data_client import user_store
from hackreg.deps import get_db
from hackreg.errors import NotAuthenticated
from hackreg.models import Role

logger = logging.getLogger("hackreg.session")

_SALT = "hackreg.admin-session"


def _serializer(secret: str = SESSION_SECRET) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret, salt=_SALT)


def issue_token(admin_oid: Any, secret: str = SESSION_SECRET) -> str:
    return _serializer(secret).dumps({"id": str(admin_oid)})


def read_token(token: str, max_age: int = SESSION_MAX_AGE_SECONDS, secret: str = SESSION_SECRET) -> str:
    """Return the admin id stored in `token`, or raise NotAuthenticated."""
    try:
        data = _serializer(secret).loads(token, max_age=max_age)
    except SignatureExpired:
        raise NotAuthenticated("Session expired. Please log in again.")
    except BadSignature:
        raise NotAuthenticated("Invalid session.")
    admin_id = data.get("id") if isinstance(data, dict) else None
    if not admin_id:
        raise NotAuthenticated("Invalid session.")
    return admin_id


def set_session_cookie(response: Response, admin_oid: Any) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        issue_token(admin_oid),
        max_age=SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


async def require_admin(request: Request, db=Depends(get_db)) -> Dict[str, Any]:
    """Dependency: the logged-in admin's user document."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        raise NotAuthenticated("Not logged in.")

    admin = await user_store.get_by_object_id(db, read_token(token))
    if admin is None or admin.get("role") != Role.ADMIN.value:
        logger.warning("Session cookie for unknown or non-admin user on %s", request.url.path)
        raise NotAuthenticated("Invalid session.")
    return admin
