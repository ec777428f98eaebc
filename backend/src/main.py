"""Main FastAPI Application

Wires middleware, global exception handlers, the API routers, the
Socket.IO server and the match expiry sweeper.

Run locally for development with:

    uvicorn main:socket_app --reload

Keep application logic in `application`, `domain` and `infrastructure`;
this module only assembles them.
"""
import asyncio
from contextlib import asynccontextmanager, suppress

import socketio
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.database import init_db, close_db, health_check as database_health_check
import core.logging_config  # noqa: F401
from core.exceptions import (
    DomainException,
    AuthenticationException,
    AuthorizationException,
    ValidationException,
    ResourceNotFoundException,
    DuplicateResourceException,
    InvalidStateTransitionException,
    RepositoryException,
)
from presentation.api.v1.container import (
    authenticate_token,
    build_expiry_sweeper,
    get_connection_registry,
    get_socket_server,
)
from presentation.api.v1.endpoints import (
    auth_router,
    jobs_router,
    matches_router,
    notifications_router,
)
from presentation.api.v1.rate_limit import limiter
from presentation.realtime import register_socket_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")

    await init_db()
    logger.info("Database initialized")

    sweeper = None
    sweeper_task = None
    if settings.MATCH_EXPIRY_SWEEP_ENABLED:
        sweeper = build_expiry_sweeper()
        sweeper_task = asyncio.create_task(sweeper.start())

    yield

    # Shutdown
    logger.info("Shutting down gracefully...")
    if sweeper is not None:
        await sweeper.stop()
        sweeper_task.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper_task

    await close_db()
    logger.info("Database connections closed")


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Job board matching service: candidate/job matches, lifecycle and notifications",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


# Global Exception Handlers
@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    """Handle domain-level exceptions"""
    if isinstance(exc, RepositoryException):
        logger.opt(exception=exc).error(f"Repository failure on {request.method} {request.url.path}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    logger.warning(f"Domain exception on {request.method} {request.url.path}: {str(exc)}")

    headers = None
    if isinstance(exc, AuthenticationException):
        status_code = status.HTTP_401_UNAUTHORIZED
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, AuthorizationException):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, ValidationException):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, ResourceNotFoundException):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (DuplicateResourceException, InvalidStateTransitionException)):
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_400_BAD_REQUEST

    return _error(status_code, str(exc), headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed requests are reported as 400 with a readable message"""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg", "invalid"))
    message = "; ".join(problems) or "Invalid request"
    logger.info(f"Validation failed on {request.method} {request.url.path}: {message}")
    return _error(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit exceeded for {request.client.host if request.client else 'unknown'}")
    return _error(status.HTTP_429_TOO_MANY_REQUESTS, "Rate limit exceeded. Please try again later.")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler"""
    logger.opt(exception=exc).error(f"Unhandled exception on {request.method} {request.url.path}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Include API routes
app.include_router(auth_router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(jobs_router, prefix="/api/v1", tags=["Jobs"])
app.include_router(matches_router, prefix="/api/v1", tags=["Matches"])
app.include_router(notifications_router, prefix="/api/v1", tags=["Notifications"])


@app.get("/health")
async def health():
    """Health check endpoint"""
    database_ok = await database_health_check()
    return JSONResponse(
        status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"success": database_ok, "data": {"database": database_ok}},
    )


# Socket.IO for real-time notifications
sio = get_socket_server()
register_socket_handlers(sio, get_connection_registry(), authenticate_token)

# Wrap FastAPI with Socket.IO
socket_app = socketio.ASGIApp(
    sio,
    app,
    socketio_path="/socket.io"
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:socket_app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
