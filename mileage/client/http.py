from typing import Any, Optional

import httpx
import structlog

from mileage.client.auth import SKIP_AUTH
from mileage.client.config import ClientSettings
from mileage.client.errors import ApiError

logger = structlog.get_logger()


def build_http_client(
    settings: ClientSettings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.api_url,
        timeout=settings.http_timeout_seconds,
        headers={"Accept": "application/json", "User-Agent": settings.user_agent},
        transport=transport,
    )


async def send(
    http: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    skip_auth: bool = False,
    **kwargs: Any,
) -> Any:
    """
    Issue one request and return the decoded JSON body (None for empty bodies).

    Raises ApiError for non-2xx answers, transport failures and unreadable bodies.
    """
    extensions = {SKIP_AUTH: True} if skip_auth else None
    try:
        response = await http.request(method, url, extensions=extensions, **kwargs)
    except httpx.HTTPError as exc:
        logger.warning("http_transport_error", method=method, url=url, error=str(exc))
        raise ApiError(0, [str(exc) or type(exc).__name__]) from exc

    if response.is_error:
        raise ApiError.from_response(response)

    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise ApiError(response.status_code, ["Invalid JSON response"]) from exc
