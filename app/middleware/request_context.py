"""Request ID and correlation ID middleware.

Generates or forwards X-Request-ID and X-Correlation-ID, echoes both on the
response and binds them to the request context so log lines carry them.
Client-provided values are sanitized (length + character set) to prevent log injection.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming.
"""

import re
import uuid
from typing import Callable

from app.shared.context import (
    reset_correlation_id,
    reset_request_id,
    set_correlation_id,
    set_request_id,
)

ID_MAX_LENGTH = 64
ID_ALLOWED_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1," + str(ID_MAX_LENGTH) + r"}$")


def _get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive). Headers are (bytes, bytes)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def sanitize_id(raw: str | None) -> str:
    """Return raw if valid and safe; otherwise return a new UUID."""
    if not raw or not ID_ALLOWED_PATTERN.match(raw.strip()):
        return str(uuid.uuid4())
    return raw.strip()


def RequestContextMiddleware(
    app: Callable,
    request_id_header: str = "X-Request-ID",
    correlation_id_header: str = "X-Correlation-ID",
) -> Callable:
    """Bind request and correlation IDs for the duration of each HTTP request. Raw ASGI.

    The correlation ID defaults to the request ID when the client sends none.
    """

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_id(_get_header(scope, request_id_header))
        raw_correlation = _get_header(scope, correlation_id_header)
        correlation_id = sanitize_id(raw_correlation) if raw_correlation else request_id
        state = scope.setdefault("state", {})
        state["request_id"] = request_id
        state["correlation_id"] = correlation_id

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((request_id_header.lower().encode(), request_id.encode()))
                headers.append(
                    (correlation_id_header.lower().encode(), correlation_id.encode())
                )
                message["headers"] = headers
            await send(message)

        request_token = set_request_id(request_id)
        correlation_token = set_correlation_id(correlation_id)
        try:
            await app(scope, receive, send_wrapper)
        finally:
            reset_correlation_id(correlation_token)
            reset_request_id(request_token)

    return asgi_app
