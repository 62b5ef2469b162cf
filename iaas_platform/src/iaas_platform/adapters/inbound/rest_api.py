"""FastAPI REST adapter for the IaaS platform.

Translates HTTP requests into orchestration commands and domain results
into JSON responses. The adapter owns everything user-visible: payload
validation, status codes and error text. Storage failure details are
logged, never returned.

Endpoints:
    GET  /health                 - Health check (no auth)
    POST /servers                - Create a server
    GET  /servers                - List all servers
    POST /servers/{id}/disks     - Attach a disk to a server
    GET  /api-doc/openapi.json   - OpenAPI description

Usage:
    from iaas_platform.adapters.inbound.rest_api import create_app

    service = ServerService(FileServerRepository("./storage"))
    app = create_app(service)
    # Run with uvicorn: uvicorn app:app --host 127.0.0.1 --port 8080
"""

from __future__ import annotations

import time
import uuid
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from iaas_platform import __version__
from iaas_platform.adapters.inbound.security import (
    SECURITY_HEADERS,
    SecurityHeadersMiddleware,
    api_key_guard,
)
from iaas_platform.domain.entities import Server
from iaas_platform.domain.errors import ServerNotFoundError, StorageError
from iaas_platform.infrastructure.config import Config, get_config
from iaas_platform.infrastructure.logging import get_logger
from iaas_platform.ports.inbound import AttachDiskCommand, CreateServerCommand, ManageServers

logger = get_logger(__name__)

NOT_FOUND_ERROR = "Resource not found"
INTERNAL_ERROR = "An internal error occurred"
INVALID_REQUEST_ERROR = "Invalid request"


class CreateServerRequest(BaseModel):
    """Request model for server creation."""

    name: str = Field(..., description="Server label (not unique)")
    cpu: int = Field(..., ge=1, description="CPU cores")
    ram: int = Field(..., ge=1, description="RAM in GB")
    storage: int = Field(..., ge=1, description="Root storage in GB")


class CreateDiskRequest(BaseModel):
    """Request model for disk attachment."""

    size_gb: int = Field(..., ge=1, description="Disk size in GB")


class DiskResponse(BaseModel):
    """Attached disk."""

    id: UUID
    size_gb: int


class ServerResponse(BaseModel):
    """Server state returned to clients."""

    id: UUID
    name: str
    status: str = Field(..., description="Provisioning, Running, Stopped or Terminated")
    disks: list[DiskResponse] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Sanitized error body."""

    error: str


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")


def _server_to_response(server: Server) -> ServerResponse:
    """Convert a Server entity to its wire representation."""
    return ServerResponse(
        id=server.id,
        name=server.name,
        status=server.status.value,
        disks=[DiskResponse(id=d.id, size_gb=d.size_gb) for d in server.additional_disks],
    )


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def create_app(service: ManageServers, config: Config | None = None) -> FastAPI:
    """Create a FastAPI application for the IaaS platform.

    Args:
        service: The orchestration service (shared by all requests).
        config: Platform configuration (defaults to the global one).

    Returns:
        A configured FastAPI application.
    """
    config = config or get_config()

    app = FastAPI(
        title="IaaS Platform API",
        description="Server management endpoints",
        version=__version__,
        openapi_url="/api-doc/openapi.json",
    )
    app.add_middleware(SecurityHeadersMiddleware)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        start = time.perf_counter()
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)
            logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 3),
            )
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(ServerNotFoundError)
    async def handle_not_found(request: Request, exc: ServerNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_ERROR)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("request_failed", path=request.url.path, error=str(exc))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

    @app.exception_handler(RequestValidationError)
    async def handle_invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("invalid_request", path=request.url.path, errors=len(exc.errors()))
        return _error(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST_ERROR)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    # Runs outside the middleware stack, so the security headers are set here.
    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            INTERNAL_ERROR,
            headers=SECURITY_HEADERS,
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    require_api_key = api_key_guard(
        config.security.api_key,
        config.security.api_key_header,
    )
    router = APIRouter(
        prefix="/servers",
        tags=["IaaS API"],
        dependencies=[Depends(require_api_key)],
        responses={
            401: {"model": ErrorResponse, "description": "Invalid or missing API key"},
            400: {"model": ErrorResponse, "description": "Invalid request"},
            500: {"model": ErrorResponse, "description": "Internal failure"},
        },
    )

    # Sync handlers: FastAPI runs them on its thread pool, so blocking file
    # I/O never stalls the event loop.
    @router.post("", response_model=ServerResponse)
    def create_server(request: CreateServerRequest) -> ServerResponse:
        """Create a server. It starts in Provisioning with no disks."""
        cmd = CreateServerCommand(
            name=request.name,
            cpu=request.cpu,
            ram=request.ram,
            storage=request.storage,
        )
        return _server_to_response(service.create_server(cmd))

    @router.get("", response_model=list[ServerResponse])
    def list_servers() -> list[ServerResponse]:
        """List all servers."""
        return [_server_to_response(s) for s in service.list_servers()]

    @router.post(
        "/{server_id}/disks",
        response_model=ServerResponse,
        responses={404: {"model": ErrorResponse, "description": "Server not found"}},
    )
    def attach_disk(server_id: UUID, request: CreateDiskRequest) -> ServerResponse:
        """Attach a new disk to a server."""
        cmd = AttachDiskCommand(server_id=server_id, size_gb=request.size_gb)
        return _server_to_response(service.attach_disk(cmd))

    app.include_router(router)

    return app


def run_server(service: ManageServers, config: Config | None = None) -> None:
    """Run the REST API server.

    Args:
        service: The orchestration service.
        config: Platform configuration (host and port).
    """
    import uvicorn

    config = config or get_config()
    app = create_app(service, config)
    logger.info(
        "api_starting",
        host=config.server.host,
        port=config.server.port,
    )
    # log_config=None keeps the structlog setup in charge of uvicorn's loggers
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)
