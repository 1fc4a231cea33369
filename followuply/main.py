#!/usr/bin/env python3
"""
FollowUply - FastAPI Backend

Main application entry point with:
- REST API endpoints for clients, invoices, reminders, expenses
- Per-user rate limiting on every mutating action
- Undo window for deletes
- Toast payloads on every response, errors included
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from followuply import __version__
from followuply.config import config
from followuply.errors import AppError, ValidationError
from followuply.middleware.rate_limiter import get_rate_limit_gate
from followuply.models.database import init_db
from followuply.routers import (
    clients_router, invoices_router, reminders_router, expenses_router,
    profile_router, notifications_router, dashboard_router, undo_router,
    preferences_router, search_router
)
from followuply.services.audit_service import get_audit_service
from followuply.services.toast import toast_for_error
from followuply.services.undo import get_undo_registry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle hooks"""
    logger.info("Starting FollowUply...")

    init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down FollowUply...")
    # Pending countdowns and undo windows die with the process
    get_rate_limit_gate().close()
    get_undo_registry().close()
    logger.info("Shutdown complete")


async def app_error_handler(request: Request, exc: AppError):
    """Every expected failure answers with its toast"""
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.error_code}")
    body = exc.to_dict()
    body["toast"] = toast_for_error(exc).model_dump()
    headers = {}
    retry_after = getattr(exc, "retry_after", None)
    if retry_after is not None:
        headers["Retry-After"] = str(max(1, int(-(-retry_after // 1))))
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies get the same treatment as a failed form"""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())[1:])
        messages.append(f"{field}: {error.get('msg')}" if field else error.get("msg", "Invalid input provided"))
    return await app_error_handler(request, ValidationError(messages or ["Invalid input provided"]))


async def unhandled_error_handler(request: Request, exc: Exception):
    """Last line of defence: log it, show the fallback toast"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "error_code": "INTERNAL_ERROR",
            "message": "Internal server error",
            "toast": toast_for_error(exc).model_dump(),
        },
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="FollowUply",
        description="Clients, invoices, reminders and expenses for freelancers",
        version=__version__,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include routers
    app.include_router(clients_router)
    app.include_router(invoices_router)
    app.include_router(reminders_router)
    app.include_router(expenses_router)
    app.include_router(profile_router)
    app.include_router(notifications_router)
    app.include_router(dashboard_router)
    app.include_router(undo_router)
    app.include_router(preferences_router)
    app.include_router(search_router)

    @app.get("/")
    async def root():
        """Show API info"""
        return {
            "app": "FollowUply",
            "version": __version__,
            "status": "running",
            "endpoints": {
                "clients": "/api/clients",
                "invoices": "/api/invoices",
                "reminders": "/api/reminders",
                "expenses": "/api/expenses",
                "search": "/api/search",
                "docs": "/docs"
            }
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "audit_sheet_configured": get_audit_service().sheet_enabled,
        }

    return app


app = create_app()


def main():
    uvicorn.run(
        "followuply.main:app",
        host="0.0.0.0",
        port=config.PORT,
        reload=not config.is_production(),
        log_level="info"
    )


if __name__ == "__main__":
    main()
