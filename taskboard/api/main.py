"""
HTTP adapter for the procedure namespace.

Queries are served as ``GET /trpc/{name}?input=<json>``, mutations as
``POST /trpc/{name}`` with a JSON body. Results come back as
``{"result": {"data": ...}}``; failures use the ErrorResponse envelope.

Run locally:
    uvicorn taskboard.api.main:app --reload
"""
from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Optional, Union
from uuid import uuid4

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.api.procedures import ProcedureKind
from taskboard.api.routes import app_router
from taskboard.core.deps import get_database
from taskboard.core.errors import (
    ConflictError,
    EntityReferenceError,
    NotFoundError,
    ProcedureNotFoundError,
    StoreError,
    TaskboardError,
    ValidationError,
)
from taskboard.core.logging import configure_logging, correlation_id_var
from taskboard.core.settings import AppSettings, get_app_settings
from taskboard.db.run_migrations import main as run_alembic
from taskboard.db.seed import seed_demo
from taskboard.db.session import Database
from taskboard.schemas.common import ErrorInfo, ErrorResponse, MessageResponse, ProcedureInfo

logger = logging.getLogger(__name__)

# Domain error -> HTTP status; first match wins.
ERROR_STATUS: Dict[type, int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ProcedureNotFoundError: status.HTTP_404_NOT_FOUND,
    EntityReferenceError: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
    StoreError: status.HTTP_503_SERVICE_UNAVAILABLE,
}

openapi_tags = [
    {"name": "System", "description": "Health and namespace discovery."},
    {"name": "Procedures", "description": "Query (GET) and mutation (POST) invocation by procedure name."},
]


def error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    """Render an ErrorResponse envelope for the current request."""
    body = ErrorResponse(
        status=status_code,
        error=ErrorInfo(type=error_type, message=message, details=details),
        correlation_id=getattr(request.state, "correlation_id", None),
        procedure=request.path_params.get("name"),
        path=request.url.path,
        method=request.method,
        timestamp=datetime.now(tz=timezone.utc),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _decode_input(raw: Union[str, bytes, None]) -> Any:
    if not raw:
        return None
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValidationError("input must be UTF-8 JSON", fields=["input"]) from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError("input must be JSON", fields=["input"]) from exc


def _require_kind(name: str, kind: ProcedureKind) -> None:
    procedure = app_router.get(name)
    if procedure.kind is not kind:
        method = "GET" if procedure.kind is ProcedureKind.QUERY else "POST"
        raise HTTPException(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail=f"{name} is a {procedure.kind.value}; use {method}",
        )


procedures_router = APIRouter(tags=["Procedures"])


# PUBLIC_INTERFACE
@procedures_router.get(
    "/trpc/{name}",
    summary="Invoke a query",
    description="Run a read-only procedure. Input is passed as URL-encoded JSON in the `input` parameter.",
)
async def invoke_query(
    name: str,
    input: Optional[str] = Query(None, description="JSON-encoded procedure input"),
    database: Database = Depends(get_database),
) -> Dict[str, Any]:
    _require_kind(name, ProcedureKind.QUERY)
    data = await app_router.call(database, name, _decode_input(input))
    return {"result": {"data": data}}


# PUBLIC_INTERFACE
@procedures_router.post(
    "/trpc/{name}",
    summary="Invoke a mutation",
    description="Run a procedure that changes stored state. Input is the JSON request body.",
)
async def invoke_mutation(
    name: str,
    request: Request,
    database: Database = Depends(get_database),
) -> Dict[str, Any]:
    _require_kind(name, ProcedureKind.MUTATION)
    data = await app_router.call(database, name, _decode_input(await request.body()))
    return {"result": {"data": data}}


system_router = APIRouter(tags=["System"])


# PUBLIC_INTERFACE
@system_router.get("/health", response_model=MessageResponse, summary="Health Check")
def health_check() -> MessageResponse:
    """Liveness probe; does not touch the store."""
    return MessageResponse(message="Healthy")


# PUBLIC_INTERFACE
@system_router.get(
    "/procedures",
    response_model=List[ProcedureInfo],
    summary="List procedures",
    description="Every procedure in the namespace with its kind (query or mutation).",
)
def list_procedures() -> List[ProcedureInfo]:
    return [ProcedureInfo(**item) for item in app_router.describe()]


def _install_middleware(app: FastAPI, settings: AppSettings) -> None:
    allow_credentials = settings.CORS_ALLOW_CREDENTIALS
    if allow_credentials and settings.CORS_ORIGINS == ["*"]:
        # Browsers refuse credentialed requests to a wildcard origin.
        logger.warning("CORS credentials disabled because CORS_ORIGINS is '*'")
        allow_credentials = False
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=allow_credentials,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    @app.middleware("http")
    async def correlation_middleware(request: Request, call_next):
        """Bind a correlation id (incoming header or a fresh uuid4) and echo it as X-Correlation-ID."""
        cid = request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or str(uuid4())
        token = correlation_id_var.set(cid)
        request.state.correlation_id = cid
        try:
            logger.info("%s %s", request.method, request.url.path)
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)
        response.headers["X-Correlation-ID"] = cid
        return response


def _install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskboardError)
    async def on_domain_error(request: Request, exc: TaskboardError):
        code = next(
            (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
        if code >= 500:
            logger.error("Procedure failed: %s", exc.message)
        return error_response(request, code, exc.type, exc.message, exc.details)

    # Starlette raises its own class for unknown routes and wrong methods.
    @app.exception_handler(StarletteHTTPException)
    async def on_http_error(request: Request, exc: StarletteHTTPException):
        if isinstance(exc.detail, str):
            return error_response(request, exc.status_code, "http_error", exc.detail)
        return error_response(request, exc.status_code, "http_error", "HTTP Error", exc.detail)

    @app.exception_handler(RequestValidationError)
    async def on_request_validation_error(request: Request, exc: RequestValidationError):
        return error_response(request, 422, "validation_error", "Request validation failed", exc.errors())

    @app.exception_handler(Exception)
    async def on_unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error processing request")
        return error_response(request, 500, "internal_error", "An unexpected error occurred")


# PUBLIC_INTERFACE
def create_app(database: Optional[Database] = None, settings: Optional[AppSettings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters:
        database: store handle to use. When omitted, one is built from the
            environment at startup and disposed at shutdown.
        settings: application settings; read from the environment when omitted.
    """
    settings = settings or get_app_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = app.state.database is None
        if owned:
            app.state.database = Database.from_settings()
        if settings.RUN_MIGRATIONS_ON_STARTUP:
            logger.info("alembic upgrade head")
            # env.py runs its own event loop, so keep it off this one.
            await asyncio.to_thread(run_alembic, ["upgrade", "head"])
        if settings.AUTO_SEED:
            await seed_demo(app.state.database)
        try:
            yield
        finally:
            if owned:
                await app.state.database.dispose()
                app.state.database = None

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.database = database

    _install_middleware(app, settings)
    _install_exception_handlers(app)
    app.include_router(system_router)
    app.include_router(procedures_router)
    return app


app = create_app()
