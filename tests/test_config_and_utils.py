import datetime as dt
import re

import pytest
from bson import ObjectId

from hackreg import config
from hackreg.utils import mask_contact, mask_email, new_team_id, new_user_id, substring_filter, to_jsonable


def test_validate_config_defaults_pass():
    config.validate_config()


def test_validate_config_rejects_unknown_env(monkeypatch):
    monkeypatch.setattr(config, "APP_ENV", "staging")
    with pytest.raises(RuntimeError, match="APP_ENV"):
        config.validate_config()


def test_production_needs_real_secret(monkeypatch):
    monkeypatch.setattr(config, "APP_ENV", "production")
    monkeypatch.setattr(config, "SESSION_SECRET", config._DEV_SECRET)
    with pytest.raises(RuntimeError, match="SESSION_SECRET"):
        config.validate_config()

    monkeypatch.setattr(config, "SESSION_SECRET", "a-long-random-secret")
    config.validate_config()


def test_diag_config_has_no_secrets():
    diag = config.config_diag_safe()
    assert config.SESSION_SECRET not in {str(v) for v in diag.values()}
    assert "mongodb_uri" not in diag


def test_diag_endpoints(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/api/diag/config").json()["mongodb_db"] == config.MONGODB_DB


def test_ids_look_right():
    assert re.fullmatch(r"UID[0-9A-F]{10}", new_user_id())
    assert re.fullmatch(r"TID[0-9A-F]{8}", new_team_id())
    assert len({new_user_id() for _ in range(200)}) == 200


def test_to_jsonable_converts_nested_values():
    oid = ObjectId()
    when = dt.datetime(2025, 1, 2, 3, 4, 5)
    out = to_jsonable({"_id": oid, "members": [{"_id": oid, "createdAt": when}]})
    assert out == {
        "_id": str(oid),
        "members": [{"_id": str(oid), "createdAt": "2025-01-02T03:04:05+00:00"}],
    }


def test_substring_filter_escapes():
    assert substring_filter("a.b(") == {"$regex": r"a\.b\(", "$options": "i"}


def test_masking():
    assert mask_email("alice@example.com") == "a***@example.com"
    assert mask_contact("9876543210") == "******3210"
    assert mask_email("garbage") == "***"
