"""
auth/passwords.py -- Password hashing, verification, and credential checks.

Security design decisions:
  bcrypt, used directly (no passlib wrapper). gensalt() draws a fresh random
  salt on every call, so two hashes of the same password never compare equal.
  The cost factor stays at the library default (12 rounds).

  verify_password() is a boolean, never an exception. A corrupt hash, an empty
  hash, and a wrong password all look the same to callers, so handlers cannot
  accidentally leak which one happened.

  The _DUMMY_HASH constant enables timing equalization in authenticate_user()
  so response time does not reveal whether an email is registered.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import bcrypt

from core.errors import CredentialError, NotFound

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserRepository

logger = logging.getLogger("catalogapi.auth")


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Raises CredentialError when bcrypt rejects the input. bcrypt 5.x refuses
    passwords longer than 72 bytes instead of silently truncating them; the
    API layer caps password length well below that for ASCII input.
    """
    try:
        return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
    except (ValueError, TypeError, MemoryError) as exc:
        raise CredentialError(f"Password hashing failed: {type(exc).__name__}") from exc


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except Exception:
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("catalogapi_timing_dummy")


def authenticate_user(store: UserRepository, email: str, password: str) -> User | None:
    """Check an email/password pair with timing equalization.

    Always runs bcrypt whether or not the email is registered:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the User on success, None on any failure. Storage failures
    propagate -- they are not credential outcomes.
    """
    try:
        user = store.find_by_email(email)
    except NotFound:
        # Do NOT return before running bcrypt.
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
