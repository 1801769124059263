# hackreg/routes/register_routes.py
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from hackreg.deps import get_db
from hackreg.models import RegisterRequest
from hackreg.registration import register_team
from hackreg.utils import to_jsonable

logger = logging.getLogger("hackreg")

router = APIRouter(prefix="/api", tags=["register"])


@router.post("/register", status_code=201)
async def register(req: RegisterRequest, db=Depends(get_db)):
    """
    Public registration endpoint used by the multi-step form.
    Errors (400) are raised as PortalError and rendered by main.py.
    """
    team_id, team = await register_team(db, req)
    return JSONResponse(
        status_code=201,
        content={
            "message": "Team registered successfully",
            "teamId": team_id,
            "team": to_jsonable(team),
        },
    )
