"""Shared-secret header check guarding the status route."""

import hmac
import logging
from typing import Optional

from fastapi import Request
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)


class Unauthorized(Exception):
    """Raised by SecretHeaderGuard; rendered as 401 'Unauthorized'."""


def secrets_match(provided: Optional[str], expected: str) -> bool:
    """Constant-time, byte-for-byte comparison. A missing header never matches.

    Header values arrive latin-1 decoded (ASGI), so re-encoding as latin-1 gives
    the raw wire bytes; the configured secret is compared as UTF-8.
    """
    if provided is None:
        return False
    try:
        provided_bytes = provided.encode("latin-1")
    except UnicodeEncodeError:
        provided_bytes = provided.encode("utf-8")
    return hmac.compare_digest(provided_bytes, expected.encode("utf-8"))


class SecretHeaderGuard:
    """FastAPI dependency: request must carry `<header_name>: <secret>`."""

    def __init__(self, header_name: str, secret: str):
        self.header_name = header_name
        self._secret = secret

    def authorize(self, request: Request) -> bool:
        return secrets_match(request.headers.get(self.header_name), self._secret)

    def __call__(self, request: Request) -> None:
        if not self.authorize(request):
            raise Unauthorized()


async def unauthorized_handler(request: Request, exc: Unauthorized) -> PlainTextResponse:
    return PlainTextResponse("Unauthorized", status_code=401)
