"""
Species Catalog Backend — Session Verification
==============================================

What:  Turns the session token the hosted auth service issued into a
       `Session` for the current request.
How:   Reads the token from `Authorization: Bearer <token>` or, failing
       that, from the session cookie, and verifies signature, expiry and
       audience with PyJWT.
Who:   FastAPI dependencies used by every protected route.

This module never issues tokens. Sign-up, sign-in and refresh stay with
the auth service.

Two flavours of "not signed in":
    get_session()              → AuthenticationError (401), for API calls
    get_session_or_redirect()  → LoginRequiredError (303 → entry point), for the listing page
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt
from fastapi import Request

from app.config import settings
from app.exceptions import AuthenticationError, LoginRequiredError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """The verified identity behind a request."""

    user_id: uuid.UUID
    email: Optional[str] = None


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Returns the token from an Authorization header, or None if there is no header."""
    raw = (authorization or "").strip()
    if not raw:
        return None

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise AuthenticationError("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise AuthenticationError("Authorization must be: Bearer <token>.")
    return token


def decode_session_token(token: str) -> Session:
    """
    Verify a session token and return the session it describes.

    Raises:
        AuthenticationError: empty, expired, tampered, wrong audience, or
            a `sub` claim that is not a UUID.
    """
    raw = (token or "").strip()
    if not raw:
        raise AuthenticationError("Session token is empty.")

    if not settings.auth_jwt_secret:
        # Without a secret every signature check would be meaningless
        logger.error("AUTH_JWT_SECRET is not configured; rejecting session token")
        raise AuthenticationError("Sessions cannot be verified right now.")

    try:
        payload: Dict[str, Any] = jwt.decode(
            raw,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Your session has expired. Please sign in again.") from exc
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected session token: %s", type(exc).__name__)
        raise AuthenticationError("Invalid session token.") from exc

    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError as exc:
        raise AuthenticationError("Invalid session token.") from exc

    email = payload.get("email")
    return Session(user_id=user_id, email=str(email) if email else None)


def _token_from_request(request: Request) -> Optional[str]:
    token = _extract_bearer_token(request.headers.get("Authorization"))
    if token:
        return token
    cookie = (request.cookies.get(settings.session_cookie_name) or "").strip()
    return cookie or None


async def get_session(request: Request) -> Session:
    """
    FastAPI dependency for API routes: a verified session or a 401.

    Example usage in a route:
        @router.post("/species")
        async def create(session: Session = Depends(get_session)): ...
    """
    token = _token_from_request(request)
    if token is None:
        raise AuthenticationError("You must be signed in to do that.")
    return decode_session_token(token)


async def get_session_or_redirect(request: Request) -> Session:
    """
    FastAPI dependency for protected pages: a verified session, or a
    redirect to the application's entry point for anyone else.
    """
    try:
        return await get_session(request)
    except AuthenticationError as exc:
        logger.info("Redirecting unauthenticated visitor: %s", exc.message)
        raise LoginRequiredError(redirect_to=settings.entry_point_url) from exc
