"""Redirect route for short URLs."""

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

router = APIRouter()


@router.get("/{shortcode}", include_in_schema=False)
async def redirect_to_url(request: Request, shortcode: str):
    """Redirect to the original URL, recording the click."""
    service = request.app.state.service

    client_ip = getattr(request.state, "client_ip", None)
    if client_ip is None and request.client:
        client_ip = request.client.host

    # Raises NotFoundError (404) or ExpiredError (410) for dead links
    original_url = service.resolve_and_record_click(
        shortcode,
        referrer=request.headers.get("referer"),
        user_agent=request.headers.get("user-agent"),
        source_ip=client_ip,
    )

    # 302 so browsers come back through us and every visit is counted
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
