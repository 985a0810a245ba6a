"""
Banking Dashboard API Application Factory
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .accounts import router as accounts_router
from .transactions import router as transactions_router
from .dependencies import BankingSystem
from .. import __version__
from ..config import get_config
from ..errors import ApiError, ValidationError
from ..logging_config import get_logger, log_action, setup_logging
from ..seed import seed_sample_data


logger = get_logger("bank_dashboard.api")


def _validation_details(exc: RequestValidationError):
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        details.append(f"{location}: {message}" if location else message)
    return details


def register_error_handlers(app: FastAPI) -> None:
    """Map every error to the {error, code?, details?} body"""

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        level = "error" if exc.status_code >= 500 else "warning"
        log_action(
            logger, level, exc.message,
            action=f"{request.method} {request.url.path}",
            correlation_id=getattr(request.state, "request_id", None),
            extra={"code": exc.code, "details": exc.details}
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        return await handle_api_error(
            request, ValidationError("Validation failed", _validation_details(exc))
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={"error": "Endpoint not found", "path": request.url.path}
            )
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", None)
        log_action(
            logger, "error", f"Unhandled error: {exc}",
            action=f"{request.method} {request.url.path}",
            correlation_id=request_id,
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={"error": "An unexpected error occurred", "code": "INTERNAL_ERROR"},
            headers={"X-Request-ID": request_id} if request_id else None
        )


def create_app(system: Optional[BankingSystem] = None, seed: Optional[bool] = None) -> FastAPI:
    """
    Create and configure the FastAPI application

    Args:
        system: Banking system to serve (a fresh in-memory one if not provided)
        seed: Load sample data at startup (defaults to the seed_sample_data setting)
    """
    config = get_config()
    setup_logging(config.log_level, config.log_format)

    system = system or BankingSystem(config=config)
    if seed is None:
        seed = config.seed_sample_data

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if seed:
            await seed_sample_data(system.account_store, system.transaction_store)
        yield
        await system.close()

    app = FastAPI(
        title=config.api_title,
        description="Accounts, transaction posting and transaction history",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.banking_system = system
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            log_action(
                logger, "info", f"{request.method} {request.url.path}",
                action="http_request", correlation_id=request_id,
                extra={
                    "status": status,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2)
                }
            )

    register_error_handlers(app)

    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])
    app.include_router(transactions_router, prefix="/accounts", tags=["Transactions"])

    @app.get("/health")
    async def health_check():
        """Liveness probe"""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - app.state.started_at, 3)
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": config.api_title,
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "accounts": "/accounts",
                "transactions": "/accounts/{id}/transactions",
                "summary": "/accounts/{id}/transactions/summary"
            }
        }

    return app
