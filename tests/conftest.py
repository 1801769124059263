# Ensures `import hackreg` works when running `pytest` from repo root without an install.
import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from hackreg.data_client import user_store
from hackreg.main import create_app
from hackreg.models import Role, UserDocument

ADMIN_NAME = "Grace Admin"
ADMIN_CONTACT = "9000000001"


def member(name, n, gender="male"):
    """A valid member entry; `n` keeps email/contact unique across calls."""
    return {
        "name": name,
        "email": f"{name.lower().replace(' ', '.')}{n}@example.com",
        "contact": f"98{n:08d}",
        "college": "City College",
        "stream": "CSE",
        "year": 2,
        "gender": gender,
    }


def payload(team_id, team_name, members, leader=None, theme="Theme 1", **team_overrides):
    team_data = {
        "teamName": team_name,
        "teamLeader": leader if leader is not None else members[0]["name"],
        "numTeammates": len(members),
        "numMales": sum(1 for m in members if m["gender"] == "male"),
        "numFemales": sum(1 for m in members if m["gender"] == "female"),
        "theme": theme,
    }
    team_data.update(team_overrides)
    body = {"teamData": team_data, "memberData": members}
    if team_id is not None:
        body["teamId"] = team_id
    return body


@pytest.fixture
def db():
    return AsyncMongoMockClient()["hackreg_test"]


@pytest.fixture
def run():
    """Run a coroutine to completion (store-level tests without an async plugin)."""
    return asyncio.run


@pytest.fixture
def client(db):
    app = create_app(database=db)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin(db):
    doc = UserDocument(
        user_id="UIDADMIN0001",
        name=ADMIN_NAME,
        gender="female",
        email="grace.admin@example.org",
        contact=ADMIN_CONTACT,
        college="Organizing Committee",
        stream="Administration",
        year=1,
        role=Role.ADMIN,
    )
    oid = asyncio.run(user_store.create_admin(db, doc))
    return {"_id": oid, "name": ADMIN_NAME, "contact": ADMIN_CONTACT}


@pytest.fixture
def admin_client(client, admin):
    resp = client.post("/api/admin/login", json={"name": admin["name"], "contact": admin["contact"]})
    assert resp.status_code == 200
    return client
