"""
api/main.py -- FastAPI application entry point for DevConnector.

Run with:  python main.py
           uvicorn api.main:app --reload

create_app(settings) is the single assembly point: it takes an explicit
Settings object, builds the TokenService from it, and the lifespan opens the
stores against settings.database_url. Tests build their own app with
create_app(Settings(...)) instead of patching globals.

Middleware stack (outermost to innermost):
  1. log_requests   -- one log line per request with status and latency
  2. CORSMiddleware -- adds CORS headers for allowed browser origins

Lifespan opens the stores on startup and disposes their engines on shutdown.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from api.routes.auth import router as auth_router
from api.routes.posts import router as posts_router
from api.routes.profile import router as profile_router
from api.routes.users import router as users_router
from auth.dependencies import TOKEN_HEADER
from auth.store import UserStore
from auth.tokens import TokenService
from core.config import Settings, get_settings
from core.errors import ApiError
from posts.store import PostStore
from profiles.store import ProfileStore

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("devconnector.api")


# ---------------------------------------------------------------------------
# Lifespan -- modern startup / shutdown pattern (replaces @app.on_event)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the stores on startup and close them on shutdown.

    All three stores share settings.database_url. Each creates its own tables
    if they do not exist yet.
    """
    settings: Settings = app.state.settings
    logger.info("DevConnector API starting up")
    app.state.user_store = UserStore(settings.database_url)
    app.state.profile_store = ProfileStore(settings.database_url)
    app.state.post_store = PostStore(settings.database_url)
    logger.info("Stores initialized")

    yield

    app.state.post_store.close()
    app.state.profile_store.close()
    app.state.user_store.close()
    logger.info("DevConnector API shutdown complete")


# ---------------------------------------------------------------------------
# Exception handlers
#
# Client errors (ApiError) render as {"msg": ...} or {"errors": [...]}.
# Anything else is a server fault: the message is logged, the client gets a
# plain "Server error" with no detail.
# ---------------------------------------------------------------------------


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.content())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with one {"msg", "param", "location"} entry per failed field."""
    errors = []
    for err in exc.errors():
        loc = err.get("loc", ())
        errors.append(
            {
                "msg": err.get("msg", "Invalid value"),
                "param": str(loc[-1]) if len(loc) > 1 else "",
                "location": str(loc[0]) if loc else "body",
            }
        )
    return JSONResponse(status_code=400, content={"errors": errors})


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> PlainTextResponse:
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return PlainTextResponse("Server error", status_code=500)


async def generic_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Catch-all for unexpected server errors. Never exposes the exception to the client."""
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return PlainTextResponse("Server error", status_code=500)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build a configured FastAPI app.

    settings defaults to get_settings() (environment / .env). The TokenService
    is built here, once, from the same settings object the stores use.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="DevConnector API",
        description="Developer profiles, posts, and token-based sessions.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_service = TokenService.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", TOKEN_HEADER],
        max_age=3600,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms %s",
            request.method,
            request.url.path,
            response.status_code,
            ms,
            request.client.host if request.client else "unknown",
        )
        return response

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(users_router, prefix="/api", tags=["Users"])
    app.include_router(auth_router, prefix="/api", tags=["Auth"])
    app.include_router(profile_router, prefix="/api", tags=["Profile"])
    app.include_router(posts_router, prefix="/api", tags=["Posts"])

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root() -> str:
        """Liveness check."""
        return "API Running"

    return app


app = create_app()
