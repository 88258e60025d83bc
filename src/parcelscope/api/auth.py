"""
Bearer-token authorization for the scrape endpoint.

The token is compared against ``settings.api.auth_token`` (``AUTH_TOKEN``).
When no server token is configured, any presented token is accepted but a
header must still be sent.
"""

import logging
import secrets

from fastapi import Header, HTTPException, status

from parcelscope.settings import get_settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_token(authorization: str) -> str:
    """Return the token from an ``Authorization`` header value.

    ``Bearer <token>`` yields ``<token>``; any other value is taken as the token itself.
    """
    if authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):]
    return authorization


async def require_bearer_token(
    authorization: str | None = Header(default=None),
) -> str:
    """
    Check the ``Authorization`` header of the incoming request.

    Args:
        authorization: Raw ``Authorization`` header value

    Returns:
        The presented token

    Raises:
        HTTPException: 401 if the Authorization header is missing or empty
        HTTPException: 403 if a server token is configured and does not match
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = extract_token(authorization)
    expected = get_settings().api.auth_token

    if expected and not secrets.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Rejected scrape request with an invalid authorization token")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid authorization token",
        )

    return token
