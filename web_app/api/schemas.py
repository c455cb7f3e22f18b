"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field, StrictInt
from typing import List, Optional


class CreateShortURLRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten")
    validity: Optional[StrictInt] = Field(None, description="Validity in minutes (default 30)")
    shortcode: Optional[str] = Field(None, description="Optional custom shortcode (3-10 alphanumeric)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "validity": 30,
                },
                {
                    "url": "https://github.com/user/repo",
                    "validity": 120,
                    "shortcode": "myrepo",
                },
            ]
        }
    }


class CreateShortURLResponse(BaseModel):
    """Response after shortening a URL."""

    shortlink: str = Field(..., description="The complete short URL")
    expiry: str = Field(..., description="Expiry timestamp (ISO-8601 UTC)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shortlink": "http://localhost:5000/abc123",
                    "expiry": "2024-01-01T12:30:00.000Z",
                }
            ]
        }
    }


class ClickItem(BaseModel):
    """One recorded visit."""

    timestamp: str
    referrer: str
    userAgent: Optional[str] = None
    location: str
    ip: str


class StatisticsResponse(BaseModel):
    """Statistics for one short URL."""

    shortcode: str
    originalUrl: str
    shortlink: str
    createdAt: str
    expiry: str
    totalClicks: int
    clicks: List[ClickItem]


class URLListItem(BaseModel):
    """One entry of the all-URLs listing."""

    shortcode: str
    originalUrl: str
    shortlink: str
    createdAt: str
    expiry: str
    totalClicks: int
    isExpired: bool
    status: str


class URLListResponse(BaseModel):
    """All registered URLs, newest first."""

    urls: List[URLListItem]


class SummaryResponse(BaseModel):
    """Service-wide counters."""

    total_urls: int
    active_urls: int
    expired_urls: int
    total_clicks: int
    custom_codes_enabled: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="OK or UNHEALTHY")
    timestamp: str = Field(..., description="Check timestamp")
    service: str = Field(..., description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Machine-readable error code")
