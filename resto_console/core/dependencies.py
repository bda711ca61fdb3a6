"""
Tenant and authentication dependencies for FastAPI
"""

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
import json
import structlog

from resto_console.core.auth import decode_access_token
from resto_console.core.config import get_settings
from resto_console.core.errors import AuthError, NotConfiguredError

logger = structlog.get_logger(__name__)
security = HTTPBearer(auto_error=False)


async def _api_key_from_body(request: Request) -> Optional[str]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if isinstance(body, dict):
        value = body.get("apiKey")
        return value if isinstance(value, str) else None
    return None


async def get_optional_api_key(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """
    Resolve the tenant API key for a request.

    Order: API key header, Bearer token claim, ``apiKey`` body field on
    writes, then the configured default. A Bearer token that disagrees with
    the header is rejected.
    """
    settings = get_settings()
    header_key = request.headers.get(settings.API_KEY_HEADER)

    token_key = None
    if credentials is not None:
        payload = decode_access_token(credentials.credentials)
        if payload is None:
            raise AuthError("Invalid or expired session token")
        token_key = payload.get("api_key")

    if header_key and token_key and header_key.strip().lower() != token_key.lower():
        logger.warning("API key header does not match session token", path=request.url.path)
        raise AuthError("API key does not match session token")

    api_key = header_key or token_key
    if not api_key and request.method in ("POST", "PUT", "PATCH"):
        api_key = await _api_key_from_body(request)
    api_key = api_key or settings.DEFAULT_API_KEY

    if not api_key or not api_key.strip():
        return None
    return api_key.strip().lower()


async def get_api_key(api_key: Optional[str] = Depends(get_optional_api_key)) -> str:
    """API key for operations that require tenant scope"""
    if api_key is None:
        raise NotConfiguredError()
    return api_key
