"""
core/errors.py -- Exception taxonomy shared by every layer of the catalog API.

Each exception carries the HTTP status and machine-readable code that the API
layer renders into the ErrorResponse envelope. Core code raises these; only
api/main.py turns them into responses, so stores and auth helpers never
import FastAPI.

Classes of failure:
  Client errors  -- InvalidIdentifier, InvalidProduct, NotFound, DuplicateEmail
  Auth failures  -- TokenInvalid, TokenExpired
  Server errors  -- CredentialError, SigningError, StorageError

Layer rule: core/ is the kernel. No imports from api/, auth/, or catalog/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for every typed failure returned by the core."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail


# ---------------------------------------------------------------------------
# Client errors
# ---------------------------------------------------------------------------


class InvalidIdentifier(AppError):
    status_code = 400
    code = "invalid_identifier"
    message = "Identifier is not well-formed."


class InvalidProduct(AppError):
    status_code = 400
    code = "invalid_product"
    message = "Product failed validation."


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    message = "Resource not found."


class DuplicateEmail(AppError):
    status_code = 409
    code = "duplicate_email"
    message = "A user with this email already exists."


# ---------------------------------------------------------------------------
# Authentication failures
# ---------------------------------------------------------------------------


class TokenInvalid(AppError):
    status_code = 401
    code = "token_invalid"
    message = "Token is invalid."


class TokenExpired(AppError):
    status_code = 401
    code = "token_expired"
    message = "Token has expired."


# ---------------------------------------------------------------------------
# Server errors
# ---------------------------------------------------------------------------


class CredentialError(AppError):
    code = "credential_error"
    message = "Password could not be processed."


class SigningError(AppError):
    code = "signing_error"
    message = "Token could not be signed."


class StorageError(AppError):
    code = "storage_error"
    message = "Storage operation failed."
