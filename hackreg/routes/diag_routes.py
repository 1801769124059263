# hackreg/routes/diag_routes.py
import logging

from fastapi import APIRouter, Depends

from hackreg.config import config_diag_safe
from hackreg.data_client.mongo import ping
from hackreg.deps import get_db

logger = logging.getLogger("hackreg")
router = APIRouter(tags=["diag"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/api/diag/config")
def diag_config():
    return config_diag_safe()


@router.get("/api/diag/db")
async def diag_db(db=Depends(get_db)):
    reply = await ping(db)
    return {"ok": bool(reply.get("ok")), "database": getattr(db, "name", None)}
