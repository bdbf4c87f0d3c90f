from __future__ import annotations

from functools import lru_cache
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from proclubs.core.browser_headers import build_browser_headers
from proclubs.core.http_client import HttpClient, HttpTransportError

from ..core.config import get_settings
from ..core.errors import ProxyError

router = APIRouter(prefix="/api", tags=["ea"])

logger = logging.getLogger("proclubs_proxy")

MISSING_PARAMS_MESSAGE = "Missing endpoint or platform parameter"
INVALID_ENDPOINT_MESSAGE = "Invalid endpoint parameter"
ERROR_DETAILS_LIMIT = 500
CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=300"


@lru_cache(maxsize=1)
def get_vendor_client() -> HttpClient:
    # Single attempt: retries belong to the calling client, which sees the relayed status.
    return HttpClient(
        timeout=get_settings().vendor_timeout_seconds,
        max_retries=0,
        header_provider=build_browser_headers,
    )


def _is_vendor_path(endpoint: str) -> bool:
    return endpoint.startswith("/") and not endpoint.startswith("//") and ".." not in endpoint and "://" not in endpoint


@router.get("/ea")
def proxy_ea(request: Request, vendor: HttpClient = Depends(get_vendor_client)) -> Response:
    query = request.query_params
    endpoint = query.get("endpoint")
    platform = query.get("platform")
    if not endpoint or not platform:
        raise ProxyError(message=MISSING_PARAMS_MESSAGE, status=400)
    if not _is_vendor_path(endpoint):
        raise ProxyError(message=INVALID_ENDPOINT_MESSAGE, status=400)

    settings = get_settings()
    vendor_url = f"{settings.vendor_base_url}{endpoint}"
    forwarded = [(key, value) for key, value in query.multi_items() if key != "endpoint"]

    try:
        response = vendor.get(vendor_url, params=forwarded, timeout=settings.vendor_timeout_seconds)
    except HttpTransportError as exc:
        logger.error("vendor_transport_error url=%s error=%s", vendor_url, exc)
        raise ProxyError(message=str(exc), status=500) from exc

    if not 200 <= response.status_code < 300:
        details = (response.text or "")[:ERROR_DETAILS_LIMIT]
        logger.warning(
            "vendor_error status=%s url=%s platform=%s details=%s",
            response.status_code,
            vendor_url,
            platform,
            details,
        )
        raise ProxyError(
            message=f"EA API error: {response.status_code} {response.reason or ''}".strip(),
            status=response.status_code,
            details=details,
        )

    try:
        response.json()
    except ValueError as exc:
        logger.error("vendor_invalid_json url=%s error=%s", vendor_url, exc)
        raise ProxyError(message=str(exc), status=500) from exc

    # Relay the vendor bytes untouched; the edge cache keys on the full request URL.
    return Response(
        content=response.content,
        media_type="application/json",
        headers={"Cache-Control": CACHE_CONTROL},
    )
