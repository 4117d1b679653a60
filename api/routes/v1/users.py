"""
api/routes/v1/users.py -- Registration and token issuance endpoints.

Routes:
  POST /api/v1/users                 -- register a user; 201 with public profile
  POST /api/v1/users/generate_token  -- exchange email + password for a bearer token

Security:
  generate_token is rate-limited per client IP (TOKEN_RATE_LIMIT).
  authenticate_user() provides timing equalization -- use it, never inline
  find_by_email() + verify_password().
  Unknown email and wrong password return the identical 401 body.
  Cache-Control: no-store on token responses.
  Passwords and tokens are never logged.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import ErrorDetail, ErrorResponse, TokenRequest, TokenResponse, UserCreate, UserResponse
from auth.models import User
from auth.passwords import authenticate_user
from auth.store import UserRepository
from auth.tokens import TokenIssuer
from core.config import get_settings

logger = logging.getLogger("catalogapi.api.users")

# Auth policy: both routes are public -- a client needs them to obtain a token.
router = APIRouter()


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(request: Request, body: UserCreate) -> UserResponse:
    """Register a new user.

    The password is hashed inside User.register() before the User exists.
    DuplicateEmail (409) and StorageError (500) propagate to the app-level
    exception handler.
    """
    user_store: UserRepository = request.app.state.user_store
    user = User.register(body.name, body.email, body.password)
    user_store.create(user)
    logger.info("Registered user %s", user.id)
    return UserResponse.from_user(user)


@router.post("/users/generate_token", response_model=TokenResponse)
@limiter.limit(lambda: get_settings().token_rate_limit)  # inner: the router registers the limited wrapper
def generate_token(request: Request, body: TokenRequest) -> JSONResponse:
    """Exchange an email and password for a signed bearer token.

    Returns the same generic error for an unknown email and a wrong password
    ("bad_credentials") to avoid leaking which emails are registered.
    """
    user_store: UserRepository = request.app.state.user_store
    issuer: TokenIssuer = request.app.state.token_issuer

    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        logger.info("Token request rejected")
        resp = JSONResponse(
            status_code=401,
            content=ErrorResponse(
                error=ErrorDetail(code="bad_credentials", message="Invalid email or password."),
            ).model_dump(),
        )
        resp.headers["Cache-Control"] = "no-store"
        resp.headers["WWW-Authenticate"] = "Bearer"
        return resp

    token = issuer.issue(user.id)
    resp = JSONResponse(
        status_code=200,
        content=TokenResponse(
            access_token=token,
            token_type="bearer",  # noqa: S106 # nosec B106 -- OAuth token type, not a password
            expires_in=issuer.ttl_seconds,
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp
