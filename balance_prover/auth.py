"""
API key check for the balance proof endpoints.

Proof generation and verification are gated by a shared key sent in the
X-API-Key header once API_TOKEN is configured. /health stays open for
probes from load balancers. Request bodies carry commitments and nonces,
so the key is never accepted from the query string, where it would end
up in access logs next to them.
"""

import hmac
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from .config import Settings, get_settings


api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_token(
    api_key: Optional[str] = Depends(api_key_header),
    settings: Settings = Depends(get_settings),
) -> bool:
    """
    Check the X-API-Key header against API_TOKEN.

    Returns True without checking when no token is configured.

    Raises:
        HTTPException: 401 if a token is configured and missing or wrong
    """
    if not settings.api_token:
        return True

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API token required. Provide via X-API-Key header.",
            headers={"WWW-Authenticate": "X-API-Key"},
        )

    if not hmac.compare_digest(api_key.encode("utf-8"), settings.api_token.encode("utf-8")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API token",
            headers={"WWW-Authenticate": "X-API-Key"},
        )

    return True
