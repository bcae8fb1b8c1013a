from __future__ import annotations

import logging

import jwt
from fastapi import Depends, HTTPException, Request, status

from .config import Settings, get_settings

logger = logging.getLogger("auth")


def extract_bearer_token(request: Request) -> str:
    auth = request.headers.get("Authorization", "")
    prefix = "Bearer "
    if auth.startswith(prefix):
        token = auth[len(prefix):].strip()
        if token:
            return token
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorized to access this route")


def decode_user_id(token: str, settings: Settings) -> str:
    """Return the caller's user id carried by a signed access token.

    The id is read from ``sub`` and falls back to ``id`` for tokens minted by
    older clients.
    """
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options=options,
        )
    except jwt.PyJWTError as exc:
        logger.info("rejected access token: %s", exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorized to access this route") from exc

    user_id = claims.get("sub") or claims.get("id")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorized to access this route")
    return str(user_id)


def get_current_user_id(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> str:
    return decode_user_id(extract_bearer_token(request), settings)
