"""API route definitions."""

import json
import logging

import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from proxy.schemas import ErrorResponse, HealthStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# The browser-facing path and the bare function root both forward
PROXY_PATHS = ("/", "/api/chat")

_REJECTED_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"]


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthStatus)
async def health_check():
    """Basic liveness probe."""
    return HealthStatus(status="ok")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _backend_url_dependency(request: Request) -> str | None:
    """Retrieve the configured backend chat URL from app state."""
    return getattr(request.app.state, "backend_url", None)


def _client_dependency(request: Request) -> httpx.AsyncClient:
    """Retrieve the shared HTTP client from app state."""
    return request.app.state.http_client


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=message).model_dump(),
    )


# ---------------------------------------------------------------------------
# Forwarding
# ---------------------------------------------------------------------------


async def proxy_chat(
    request: Request,
    backend_url: str | None = Depends(_backend_url_dependency),
    client: httpx.AsyncClient = Depends(_client_dependency),
):
    """Forward the JSON body to the backend and relay its answer.

    The backend's status code and JSON body are returned unchanged. Any
    failure while parsing, forwarding or decoding becomes a 500 with an
    ``{"error": ...}`` body; no exception escapes to the caller.
    """
    if not backend_url:
        return _error_response("Backend URL not configured")

    try:
        raw = await request.body()
        payload = json.loads(raw or b"{}")

        upstream = await client.post(
            backend_url,
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        data = upstream.json()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Proxy error")
        return _error_response(str(exc))

    return JSONResponse(status_code=upstream.status_code, content=data)


async def method_not_allowed():
    """Reject anything but POST with a plain-text 405."""
    return PlainTextResponse(
        "Method Not Allowed", status_code=status.HTTP_405_METHOD_NOT_ALLOWED
    )


for _path in PROXY_PATHS:
    router.add_api_route(_path, proxy_chat, methods=["POST"])
    router.add_api_route(
        _path,
        method_not_allowed,
        methods=_REJECTED_METHODS,
        include_in_schema=False,
    )
