# hackreg/routes/admin_routes.py
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from hackreg.data_client import team_store, user_store
from hackreg.deps import get_db
from hackreg.errors import NotFound, ValidationFailed
from hackreg.metrics import ADMIN_LOGINS
from hackreg.models import AdminLogin
from hackreg.session import clear_session_cookie, require_admin, set_session_cookie

logger = logging.getLogger("hackreg")

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/login")
async def login(body: AdminLogin, db=Depends(get_db)):
    """
    Match an admin by (name, contact) and set the signed session cookie.
    """
    name = (body.name or "").strip()
    contact = str(body.contact).strip() if body.contact is not None else ""
    if not name or not contact:
        ADMIN_LOGINS.labels(outcome="invalid").inc()
        raise ValidationFailed("Name and contact number are required")

    admin = await user_store.find_admin(db, name, contact)
    if admin is None:
        ADMIN_LOGINS.labels(outcome="not_found").inc()
        logger.info("Admin login failed for name=%r", name)
        raise NotFound("Admin not found. Please check your credentials.")

    response = JSONResponse(status_code=200, content={"message": "Login successful"})
    set_session_cookie(response, admin["_id"])
    ADMIN_LOGINS.labels(outcome="success").inc()
    logger.info("Admin %s logged in", admin.get("user_id"))
    return response


@router.post("/logout")
async def logout():
    response = JSONResponse(status_code=200, content={"message": "Logged out successfully"})
    clear_session_cookie(response)
    return response


@router.get("/session")
async def current_session(admin: Dict[str, Any] = Depends(require_admin)):
    return {"id": str(admin["_id"]), "user_id": admin.get("user_id"), "name": admin.get("name")}


@router.get("/stats", dependencies=[Depends(require_admin)])
async def stats(db=Depends(get_db)):
    return {
        "totalTeams": await team_store.count_teams(db),
        "totalParticipants": await user_store.count_participants(db),
    }
