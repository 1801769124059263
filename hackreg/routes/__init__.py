# hackreg/routes/__init__.py
"""Router registry.

Single source of truth for FastAPI route inclusion.

Guidelines:
- Keep this list deterministic and explicit.
- Each router must be mounted exactly once (no duplicates).
"""

from __future__ import annotations

from hackreg.routes.admin_routes import router as admin_router
from hackreg.routes.diag_routes import router as diag_router
from hackreg.routes.register_routes import router as register_router
from hackreg.routes.team_routes import router as team_router

# Deterministic inclusion order:
# 1) Diagnostics
# 2) Public registration
# 3) Admin dashboard APIs
routers = [
    diag_router,
    register_router,
    admin_router,
    team_router,
]

__all__ = ["routers"]
