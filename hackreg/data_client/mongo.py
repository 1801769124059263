# hackreg/data_client/mongo.py
"""
MongoDB connection handling.

Responsibilities:
- Build the Motor client from config (one client per app, owned by the
  FastAPI lifespan, never a module-level cache)
- Verify connectivity at startup, retrying transient connection errors
- Create the indexes that back the uniqueness rules

The unique indexes on users.email / users.contact / teams.team_id are what
actually protects against two concurrent registrations with the same data:
the application-level "find first" check is only there for a nice message.
"""

from __future__ import annotations

import logging
from typing import Any, Tuple

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from pymongo.errors import AutoReconnect, ConnectionFailure, ServerSelectionTimeoutError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from hackreg.config import MONGODB_DB, MONGODB_TIMEOUT_MS, MONGODB_URI

logger = logging.getLogger("hackreg.mongo")

USERS = "users"
TEAMS = "teams"


def create_client(uri: str = MONGODB_URI, db_name: str = MONGODB_DB) -> Tuple[AsyncIOMotorClient, Any]:
    """
    Return (client, database). Creating the client does not open a
    connection yet; `ping()` does.
    """
    client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=MONGODB_TIMEOUT_MS, tz_aware=True)
    return client, client[db_name]


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, (ConnectionFailure, ServerSelectionTimeoutError, AutoReconnect))


@retry(
    reraise=True,
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    retry=retry_if_exception(_is_retryable),
)
async def ping(db) -> dict:
    """`ping` command with retry on connection errors only."""
    return await db.command("ping")


async def ensure_indexes(db) -> None:
    """
    Create indexes (idempotent).

    users:
      - user_id, email, contact: unique
      - (email, team_id): lookup
    teams:
      - team_id: unique
      - (team_id, theme): dashboard filter
      - members: "already in another team" check
    """
    users = db[USERS]
    teams = db[TEAMS]

    await users.create_index([("user_id", ASCENDING)], unique=True)
    await users.create_index([("email", ASCENDING)], unique=True)
    await users.create_index([("contact", ASCENDING)], unique=True)
    await users.create_index([("email", ASCENDING), ("team_id", ASCENDING)])

    await teams.create_index([("team_id", ASCENDING)], unique=True)
    await teams.create_index([("team_id", ASCENDING), ("theme", ASCENDING)])
    await teams.create_index([("members", ASCENDING)])

    logger.info("MongoDB indexes ensured on %s / %s", USERS, TEAMS)


__all__ = ["USERS", "TEAMS", "create_client", "ping", "ensure_indexes"]
