# hackreg/config.py
"""
Central configuration for the registration backend.

Design goals:
- Always load .env from the repository root in a deterministic way
- One place for MongoDB and admin-session settings
- Keep secrets out of logs (provide "safe" diagnostics)
"""

from __future__ import annotations

import os
from pathlib import Path
from dotenv import load_dotenv


# ---------------------------------------------------------------------
# 1) Repo root discovery + .env loading
# ---------------------------------------------------------------------
def _find_repo_root(start: Path) -> Path:
    """
    Walk upwards until we find a folder that looks like the repository root.
    Markers: .env, pyproject.toml, README.md
    """
    markers = (".env", "pyproject.toml", "README.md")
    for p in [start, *start.parents]:
        if any((p / m).exists() for m in markers):
            return p
    # Fallback: assume hackreg/ is directly under repo root
    return start.parents[1]


REPO_ROOT = _find_repo_root(Path(__file__).resolve())
load_dotenv(dotenv_path=REPO_ROOT / ".env", override=False)


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------
# 2) Runtime environment
# ---------------------------------------------------------------------
APP_ENV = os.getenv("APP_ENV", "development").strip().lower()
# Allowed: development | production | test
APP_DEBUG = _env_bool("APP_DEBUG", False)


# ---------------------------------------------------------------------
# 3) MongoDB
# ---------------------------------------------------------------------
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017").strip()
MONGODB_DB = os.getenv("MONGODB_DB", "hackathon").strip()
MONGODB_TIMEOUT_MS = int(os.getenv("MONGODB_TIMEOUT_MS", "5000"))


# ---------------------------------------------------------------------
# 4) Admin session cookie
#
# The cookie carries a signed + timestamped token, never a raw user id.
# ---------------------------------------------------------------------
_DEV_SECRET = "dev-only-change-me"

SESSION_SECRET = os.getenv("SESSION_SECRET", _DEV_SECRET).strip()
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "admin_session").strip()
SESSION_MAX_AGE_SECONDS = int(os.getenv("SESSION_MAX_AGE_SECONDS", str(60 * 60 * 24)))
SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE", APP_ENV == "production")


# ---------------------------------------------------------------------
# 5) HTTP
# ---------------------------------------------------------------------
CORS_ALLOW_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
]


# ---------------------------------------------------------------------
# 6) Validation helpers (used at startup)
# ---------------------------------------------------------------------
def validate_config() -> None:
    """
    Validate settings before the app starts serving.
    - APP_ENV must be a known value
    - MONGODB_URI / MONGODB_DB must be set
    - production must not run with the development signing secret
    """
    if APP_ENV not in {"development", "production", "test"}:
        raise RuntimeError(
            f"Invalid APP_ENV='{APP_ENV}'. Expected development|production|test."
        )
    if not MONGODB_URI:
        raise RuntimeError("MONGODB_URI is empty.")
    if not MONGODB_DB:
        raise RuntimeError("MONGODB_DB is empty.")
    if APP_ENV == "production" and (not SESSION_SECRET or SESSION_SECRET == _DEV_SECRET):
        raise RuntimeError("SESSION_SECRET must be set in production.")
    if SESSION_MAX_AGE_SECONDS <= 0:
        raise RuntimeError("SESSION_MAX_AGE_SECONDS must be positive.")


def config_diag_safe() -> dict:
    """
    Safe diagnostics (no secrets).
    Used by the /api/diag/config endpoint.
    """
    return {
        "repo_root": str(REPO_ROOT),
        "app_env": APP_ENV,
        "debug": APP_DEBUG,
        "mongodb_db": MONGODB_DB,
        "mongodb_timeout_ms": MONGODB_TIMEOUT_MS,
        # only whether a credential is embedded, never the URI itself
        "mongodb_uri_has_credentials": "@" in MONGODB_URI,
        "session_cookie_name": SESSION_COOKIE_NAME,
        "session_max_age_seconds": SESSION_MAX_AGE_SECONDS,
        "session_cookie_secure": SESSION_COOKIE_SECURE,
        "has_custom_session_secret": SESSION_SECRET != _DEV_SECRET,
        "cors_allow_origins": CORS_ALLOW_ORIGINS,
    }
