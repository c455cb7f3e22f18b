"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortener.errors import ShortenerError
from .api import api_router
from .web import web_router
from .middleware.headers import ForwardedHeadersMiddleware
from .middleware.logging import LoggingMiddleware

# Request body field -> error code reported when schema validation fails
_FIELD_ERROR_CODES = {
    "url": "INVALID_URL",
    "validity": "INVALID_VALIDITY",
    "shortcode": "INVALID_SHORTCODE",
}


def create_app(
    service_instance,
    config,
    lifespan=None,
    logger: logging.Logger = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: URLShortenerService instance
        config: Configuration instance
        lifespan: Optional lifespan context manager (starts the sweeper)
        logger: Optional logger for request and error logging

    Returns:
        Configured FastAPI app
    """
    logger = logger or logging.getLogger("url_shortener.web")

    app = FastAPI(
        title="URL Shortener",
        description="URL shortening service with expiry and click analytics",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config
    app.state.logger = logger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Last added runs first: forwarded headers resolve client_ip before logging
    app.add_middleware(LoggingMiddleware, logger=logger)
    app.add_middleware(ForwardedHeadersMiddleware)

    _register_exception_handlers(app, logger)

    app.include_router(api_router, tags=["API"])
    # Catch-all /{shortcode} goes last so it never shadows API paths
    app.include_router(web_router, tags=["Redirect"])

    return app


def _register_exception_handlers(app: FastAPI, logger: logging.Logger) -> None:
    @app.exception_handler(ShortenerError)
    async def shortener_error_handler(request: Request, exc: ShortenerError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(
                f"{request.method} {request.url.path} rejected: {exc.code} - {exc.message}"
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        code = "INVALID_REQUEST"
        message = "Invalid request body"
        for error in errors:
            loc = [part for part in error.get("loc", ()) if part != "body"]
            field = loc[0] if loc else None
            if field in _FIELD_ERROR_CODES:
                code = _FIELD_ERROR_CODES[field]
                message = f"{field}: {error.get('msg', 'invalid value')}"
                if field == "url" and error.get("type") == "missing":
                    code = "MISSING_URL"
                    message = "URL is required"
                break
        logger.warning(f"{request.method} {request.url.path} rejected: {code} - {message}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": message, "code": code},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            logger.warning(f"Route not found: {request.method} {request.url.path}")
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": "Route not found", "code": "ROUTE_NOT_FOUND"},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail), "code": "HTTP_ERROR"},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
        )
