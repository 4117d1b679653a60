"""
auth/tokens.py -- Bearer token issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry exactly two claims, the subject
       (a user Identifier as a string) and an integer expiry in unix seconds.
       Claims is a fixed dataclass, not a free-form dict, so both sides of the
       signing boundary agree on shape.

  Configuration: TokenConfig is built once at startup from Settings and
       handed to TokenIssuer. Nothing here reads settings or request state at
       call time.

  Expiry: jose's own exp check uses its own clock. We disable it and compare
       against the issuer's clock instead, so issuance and verification share
       one time source. No leeway: a token is expired once now > exp.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from jose import JWTError, jwt

from core.errors import SigningError, TokenExpired, TokenInvalid

logger = logging.getLogger("catalogapi.auth")


@dataclass(frozen=True)
class TokenConfig:
    """Process-wide token settings. Frozen: set at boot, read thereafter."""

    secret_key: str
    ttl_seconds: int
    algorithm: str = "HS256"


@dataclass(frozen=True)
class Claims:
    subject: str
    expires_at: int  # unix epoch seconds


class TokenIssuer:
    """Signs and verifies bearer tokens with an injected TokenConfig.

    Usage:
        issuer = TokenIssuer(TokenConfig(secret_key=key, ttl_seconds=3600))
        token = issuer.issue(user.id)
        claims = issuer.verify(token)
    """

    def __init__(self, config: TokenConfig, clock: Callable[[], float] = time.time) -> None:
        self._config = config
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._config.ttl_seconds

    def issue(self, subject: object, ttl_seconds: int | None = None) -> str:
        """Return a signed token for subject expiring ttl_seconds from now.

        ttl_seconds defaults to the configured TTL. Raises SigningError when
        the key is missing or the signer rejects it.
        """
        if not self._config.secret_key:
            raise SigningError("Signing key is not configured.")
        ttl = self._config.ttl_seconds if ttl_seconds is None else ttl_seconds
        payload = {
            "sub": str(subject),
            "exp": int(self._clock()) + int(ttl),
        }
        try:
            return jwt.encode(payload, self._config.secret_key, algorithm=self._config.algorithm)
        except (JWTError, TypeError, ValueError) as exc:
            raise SigningError(f"Token signing failed: {type(exc).__name__}") from exc

    def verify(self, token: str) -> Claims:
        """Decode and verify a token, returning its Claims.

        Raises TokenInvalid on a bad signature, malformed structure, or
        missing/ill-typed claims, and TokenExpired once now > exp.
        """
        if not self._config.secret_key:
            raise SigningError("Signing key is not configured.")
        try:
            payload = jwt.decode(
                token,
                self._config.secret_key,
                algorithms=[self._config.algorithm],
                options={"verify_exp": False},
            )
        except (JWTError, AttributeError, TypeError, ValueError):
            raise TokenInvalid() from None

        subject = payload.get("sub")
        expires_at = payload.get("exp")
        if not isinstance(subject, str) or not subject:
            raise TokenInvalid("Token has no subject.")
        # bool is an int subclass; a boolean exp is malformed, not epoch 0/1.
        if not isinstance(expires_at, int) or isinstance(expires_at, bool):
            raise TokenInvalid("Token has no valid expiry.")
        if self._clock() > expires_at:
            raise TokenExpired()
        return Claims(subject=subject, expires_at=expires_at)
