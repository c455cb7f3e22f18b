"""API routes implementation."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from shortener.common.clock import isoformat_z, utc_now
from shortener.common.headers import build_base_url
from .schemas import (
    CreateShortURLRequest,
    CreateShortURLResponse,
    StatisticsResponse,
    URLListResponse,
    SummaryResponse,
    HealthResponse,
    ErrorResponse,
)

router = APIRouter()


def request_base_url(request: Request) -> str:
    """Base URL for shortlinks as seen by this request's client."""
    config = request.app.state.config
    # Forwarded values were captured by ForwardedHeadersMiddleware
    forwarded = {
        "x-forwarded-proto": getattr(request.state, "forwarded_proto", None),
        "x-forwarded-host": getattr(request.state, "forwarded_host", None),
    }
    return build_base_url(
        headers=forwarded,
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )


@router.post(
    "/shorturls",
    response_model=CreateShortURLResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ErrorResponse, "description": "Shortcode already exists"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Create a shortened URL with an optional validity (minutes) and custom shortcode.",
)
async def create_short_url(request: Request, body: CreateShortURLRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    result = service.create_short_url(
        url=body.url,
        validity=body.validity,
        shortcode=body.shortcode or None,
        base_url=request_base_url(request),
    )

    return CreateShortURLResponse(shortlink=result["shortlink"], expiry=result["expiry"])


@router.get(
    "/shorturls/{shortcode}",
    response_model=StatisticsResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Shortcode not found"},
        410: {"model": ErrorResponse, "description": "Short URL expired"},
    },
    summary="Get URL statistics",
    description="Get the original URL, expiry and click history of a short URL.",
)
async def get_statistics(request: Request, shortcode: str):
    """Get statistics for a shortened URL."""
    service = request.app.state.service
    return service.get_statistics(shortcode, base_url=request_base_url(request))


@router.get(
    "/api/urls",
    response_model=URLListResponse,
    summary="List all URLs",
    description="List every registered URL, newest first, including expired ones not yet swept.",
)
async def list_urls(request: Request):
    """List all shortened URLs."""
    service = request.app.state.service
    return {"urls": service.list_all_urls(base_url=request_base_url(request))}


@router.get(
    "/api/stats",
    response_model=SummaryResponse,
    summary="Get service statistics",
    description="Get service-wide counters.",
)
async def get_summary(request: Request):
    """Get service statistics."""
    service = request.app.state.service
    return service.get_summary()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "Service unhealthy"}},
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service
    config = request.app.state.config

    health = service.health_check()
    body = HealthResponse(
        status="OK" if health["overall"] else "UNHEALTHY",
        timestamp=isoformat_z(utc_now()),
        service=config.service_name,
    )

    if not health["overall"]:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(),
        )
    return body
