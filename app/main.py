"""SponsorHub – FastAPI application."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings, get_settings
from app.dependencies import get_store
from app.routers import admin, auth, deals, events, packages, users
from app.seed import seed_default_agent
from app.services.errors import CODE_BY_STATUS, ServiceError, UpstreamUnavailable
from app.store import init_storage
from app.store.base import Store

log = logging.getLogger("uvicorn.error")


def _error(status_code: int, code: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "code": code, "message": message, **extra},
    )


def _validation_message(errors: list[dict]) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error(request: Request, exc: ServiceError):
        return _error(exc.status_code, exc.code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, CODE_BY_STATUS.get(exc.status_code, "ERROR"), str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return _error(400, "VALIDATION_ERROR", _validation_message(exc.errors()))

    @app.exception_handler(SQLAlchemyError)
    async def storage_error(request: Request, exc: SQLAlchemyError):
        log.exception("Storage error on %s %s", request.method, request.url.path)
        return _error(UpstreamUnavailable.status_code, UpstreamUnavailable.code, "Storage is unavailable")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(admin.router)
    app.include_router(events.router)
    app.include_router(packages.router)
    app.include_router(deals.router)

    @app.on_event("startup")
    def startup():
        if settings.mailgun_api_key and settings.mailgun_domain:
            log.info("[Mailgun] Using domain=%s from=%s", settings.mailgun_domain, settings.mailgun_from_email)
        else:
            log.info("[Mailgun] Not configured - notification emails will be skipped")
        app.state.storage = init_storage(settings)
        if settings.seed_default_agent:
            store = app.state.storage.open()
            try:
                seed_default_agent(store, settings)
            finally:
                store.close()

    @app.get("/")
    def root():
        return {"app": settings.app_name, "status": "ok"}

    @app.get("/api/health")
    def health():
        storage = app.state.storage
        return {
            "success": True,
            "status": "degraded" if storage.degraded else "healthy",
            "storage": storage.backend,
        }

    @app.get("/api/ping")
    def ping(store: Store = Depends(get_store)):
        return {"success": True, "storage": store.backend, "counts": store.stats()}

    return app


app = create_app()
