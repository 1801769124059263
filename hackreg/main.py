# hackreg/main.py
import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from hackreg.config import APP_DEBUG, CORS_ALLOW_ORIGINS, validate_config
from hackreg.data_client.mongo import create_client, ensure_indexes, ping
from hackreg.errors import PortalError
from hackreg.metrics import REGISTRY
from hackreg.routes import routers
from hackreg.utils import describe_validation_error

# ----------------------------------------------------------------------
# Logger configuration
# ----------------------------------------------------------------------
logger = logging.getLogger("hackreg")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler()
formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
handler.setFormatter(formatter)

if not logger.handlers:
    logger.addHandler(handler)
else:
    for h in logger.handlers:
        h.setFormatter(formatter)


def create_app(database=None) -> FastAPI:
    """
    Build the application.

    `database` is an already-open database handle (tests pass an in-memory
    one). When omitted, the lifespan opens a Motor client from config,
    checks it and closes it on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        validate_config()
        client = None
        if database is None:
            client, db = create_client()
            await ping(db)
            logger.info("MongoDB connection verified (%s)", db.name)
        else:
            db = database
        app.state.db = db
        try:
            await ensure_indexes(db)
            yield
        finally:
            if client is not None:
                client.close()
                logger.info("MongoDB client closed")

    app = FastAPI(title="Hackathon registration", lifespan=lifespan)

    # ------------------------------------------------------------------
    # CORS
    # ------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ------------------------------------------------------------------
    # Routers (single source of truth: hackreg/routes/__init__.py)
    # ------------------------------------------------------------------
    for r in routers:
        app.include_router(r)

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------
    app.mount("/metrics", make_asgi_app(registry=REGISTRY))

    # ------------------------------------------------------------------
    # Exception handlers: every error body is {"error": "<message>"}
    # ------------------------------------------------------------------
    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = describe_validation_error(exc)
        logger.info(f"Rejected request body on {request.url.path}: {message}")
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}\n{traceback.format_exc()}"
        )
        message = str(exc) if APP_DEBUG else "Internal server error"
        return JSONResponse(status_code=500, content={"error": message})

    return app


app = create_app()
