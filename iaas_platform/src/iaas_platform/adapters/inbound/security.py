"""API security for the REST adapter.

- Shared-secret authentication: every server endpoint requires the
  configured API key header. The check runs as a router dependency,
  before the orchestration service is called.
- Security headers: added to every response, errors included.
"""

from __future__ import annotations

import secrets
from typing import Awaitable, Callable

from fastapi import HTTPException, Request, Response, Security, status
from fastapi.security import APIKeyHeader
from pydantic import SecretStr
from starlette.middleware.base import BaseHTTPMiddleware

API_KEY_ERROR = "Invalid or missing API Key"

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Content-Security-Policy": "default-src 'none'",
}


def api_key_guard(
    expected_key: SecretStr | str,
    header_name: str = "x-api-key",
) -> Callable[[str | None], None]:
    """Build a FastAPI dependency that enforces the shared API key.

    Args:
        expected_key: The configured secret.
        header_name: Request header carrying the key.

    Returns:
        Dependency raising 401 when the key is missing or wrong.
    """
    header_scheme = APIKeyHeader(name=header_name, auto_error=False)
    if isinstance(expected_key, SecretStr):
        expected = expected_key.get_secret_value().encode()
    else:
        expected = expected_key.encode()

    def require_api_key(api_key: str | None = Security(header_scheme)) -> None:
        if api_key is None or not secrets.compare_digest(api_key.encode(), expected):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=API_KEY_ERROR,
            )

    return require_api_key


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the standard security headers to every response."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response
