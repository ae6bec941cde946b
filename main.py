"""
Main Application Entry Point

This module builds the FastAPI application: it creates the in-memory stores,
installs the session middleware, maps every error to the JSON envelope and
registers the API routes.

Dependencies:
    - FastAPI for building the API
    - Starlette's SessionMiddleware (itsdangerous-signed cookies) for sessions
    - uvicorn for serving the app when run as a script
    - Application-specific modules (stores, security, routes)
"""
import logging
import time
from datetime import datetime, timezone
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware
import config
from app.database import CatalogStore, CredentialStore
from app.errors import ApiError
from routes import auth, books, reviews
from schemas.schemas import HealthResponse

SERVICE_NAME = "Book Review API"
VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def configure_logging():
    logging.basicConfig(
        level = config.LOG_LEVEL,
        format = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

# -----------------------------------
# Exception Handlers
# -----------------------------------
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code = exc.status_code, content = exc.to_response())

async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body") or "body"
        errors[field] = error["msg"]
    return JSONResponse(
        status_code = status.HTTP_400_BAD_REQUEST,
        content = {"success": False, "message": "Invalid request", "errors": errors}
    )

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        content = {
            "success": False,
            "message": f"Route {request.method} {request.url.path} not found",
            "suggestion": "Check the API documentation for available endpoints"
        }
    else:
        content = {"success": False, "message": str(exc.detail)}
    return JSONResponse(status_code = exc.status_code, content = content, headers = exc.headers)

async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if config.IS_PRODUCTION:
        content = {"success": False, "message": "Internal server error"}
    else:
        content = {"success": False, "message": str(exc) or exc.__class__.__name__, "detail": repr(exc)}
    return JSONResponse(status_code = status.HTTP_500_INTERNAL_SERVER_ERROR, content = content)

# -----------------------------------
# FastAPI Application Initialization
# -----------------------------------
def create_app(catalog: Optional[CatalogStore] = None, credentials: Optional[CredentialStore] = None) -> FastAPI:
    configure_logging()
    app = FastAPI(
        title = SERVICE_NAME,
        description = "A small book review API: search the catalog, register, log in, and manage your own reviews.",
        version = VERSION
    )
    app.state.catalog = catalog or CatalogStore(latency = config.STORE_LATENCY_SECONDS)
    app.state.credentials = credentials or CredentialStore(latency = config.STORE_LATENCY_SECONDS)
    app.state.started_at = time.monotonic()

    # The cookie outlives the 1 hour token it carries; the gate checks the token
    app.add_middleware(
        SessionMiddleware,
        secret_key = config.SESSION_SECRET,
        max_age = config.SESSION_MAX_AGE_SECONDS,
        path = "/customer",
        https_only = config.IS_PRODUCTION
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # -----------------------------------
    # System Endpoints
    # -----------------------------------
    @app.get("/health", response_model = HealthResponse, tags = ["System"])
    async def health(request: Request):
        """Service liveness and uptime."""
        return HealthResponse(
            message = "Service is healthy",
            timestamp = datetime.now(timezone.utc),
            uptime = time.monotonic() - request.app.state.started_at,
            service = SERVICE_NAME,
            version = VERSION
        )

    @app.get("/api-docs", tags = ["System"])
    async def api_docs():
        """Plain listing of the endpoints, grouped by whether they need a login."""
        return {
            "success": True,
            "data": {
                "service": SERVICE_NAME,
                "version": VERSION,
                "endpoints": {
                    "public": [
                        {"method": "GET", "path": "/", "description": "Get all books"},
                        {"method": "GET", "path": "/isbn/{isbn}", "description": "Get book by ISBN"},
                        {"method": "GET", "path": "/author/{author}", "description": "Search books by author"},
                        {"method": "GET", "path": "/title/{title}", "description": "Search books by title"},
                        {"method": "GET", "path": "/review/{isbn}", "description": "Get book reviews"},
                        {"method": "POST", "path": "/register", "description": "Register new user"},
                        {"method": "GET", "path": "/health", "description": "Service health check"}
                    ],
                    "authenticated": [
                        {"method": "POST", "path": "/customer/login", "description": "User login"},
                        {"method": "PUT", "path": "/customer/auth/review/{isbn}", "description": "Add/update review"},
                        {"method": "DELETE", "path": "/customer/auth/review/{isbn}", "description": "Delete review"},
                        {"method": "GET", "path": "/customer/auth/profile", "description": "Get user profile"}
                    ]
                },
                "authentication": "Log in at /customer/login; the session cookie carries a JWT valid for 1 hour"
            }
        }

    # -----------------------------------
    # Register API Routes
    # -----------------------------------
    app.include_router(auth.router) # Registration and login
    app.include_router(auth.protected_router) # Profile
    app.include_router(reviews.router) # Review management routes
    app.include_router(books.router) # Public catalog routes

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info("Book Review API starting on port %s (environment: %s)", config.PORT, config.APP_ENV)
    uvicorn.run(app, host = config.HOST, port = config.PORT, log_level = config.LOG_LEVEL.lower())
