"""FastAPI application factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wehoware.config.logging import setup_logging
from wehoware.config.settings import get_settings
from wehoware.exceptions import AuthError, GateInternalError
from wehoware.storage.database import get_engine
from wehoware.web.auth.gate import AuthGate, error_response
from wehoware.web.dependencies import init_state
from wehoware.web.health import check_health
from wehoware.web.middleware import RequestContextMiddleware
from wehoware.web.routes.blogs import router as blogs_router
from wehoware.web.routes.clients import current_user
from wehoware.web.routes.clients import router as clients_router
from wehoware.web.routes.inquiries import router as inquiries_router
from wehoware.web.routes.services import router as services_router

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from wehoware.storage.repositories.identity import IdentityStore

logger = structlog.get_logger(__name__)


def create_app(
    engine: AsyncEngine | None = None,
    identity_store: IdentityStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``engine`` defaults to the configured database; ``identity_store`` defaults
    to the database-backed store on that engine.
    """
    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_output=not settings.debug)

    app = FastAPI(
        title="Wehoware",
        description="Multi-tenant marketing back-office API",
        version="0.1.0",
    )

    init_state(app.state, engine or get_engine())
    app.state.auth_gate = AuthGate(
        identity_store or app.state.identity_store,
        tenant_param=settings.tenant_query_param,
    )

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query"))
        message = f"{field}: {first.get('msg', 'invalid')}" if field else "Invalid request"
        return JSONResponse({"error": message}, status_code=400)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_request_error", path=request.url.path)
        return error_response(GateInternalError("Internal server error"))

    # Middleware: last added runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )
    app.add_middleware(RequestContextMiddleware)

    @app.get("/api/health")
    async def health_check() -> dict[str, object]:
        return await check_health(app.state.engine)

    for router in (blogs_router, services_router, inquiries_router, clients_router):
        app.include_router(router)

    app.add_route("/api/v1/me", app.state.auth_gate.wrap(current_user), methods=["GET"])

    logger.info("app_created")
    return app
