"""
auth/dependencies.py -- FastAPI Depends() helpers for bearer authentication.

Requests authenticate with an `Authorization: Bearer <token>` header carrying
a token issued by POST /api/v1/users/generate_token. The token's subject must
parse as an Identifier and resolve to an existing user.

try_get_current_user() is the soft variant (returns None on failure).
get_current_user() wraps it and raises HTTP 401 if unauthenticated.

Layer rule: no imports from api/ or catalog/.
  auth/dependencies.py may import from fastapi (for HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request

from auth.models import User
from auth.store import UserRepository
from auth.tokens import TokenIssuer
from core.errors import InvalidIdentifier, NotFound, TokenExpired, TokenInvalid
from core.identifier import parse_id

logger = logging.getLogger("catalogapi.auth")


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def try_get_current_user(request: Request) -> User | None:
    """Attempt to authenticate the request via its Bearer token.

    Returns the authenticated User on success, None on any failure.
    Never raises for bad credentials -- callers that need a hard 401 should
    use get_current_user(). Storage failures still propagate.
    """
    token = _bearer_token(request)
    if token is None:
        return None

    issuer: TokenIssuer = request.app.state.token_issuer
    user_store: UserRepository = request.app.state.user_store
    try:
        claims = issuer.verify(token)
        return user_store.find_by_id(parse_id(claims.subject))
    except TokenExpired:
        logger.info("Rejected expired token")
        return None
    except (TokenInvalid, InvalidIdentifier, NotFound):
        return None


def get_current_user(request: Request) -> User:
    """Require authentication. Raises HTTP 401 if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: User = Depends(get_current_user)): ...
    """
    user = try_get_current_user(request)
    if user is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Authentication required."},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
