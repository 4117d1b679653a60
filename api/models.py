"""
API request and response models for the catalog REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
catalog/models.py, which own the internal domain representation. Route
handlers map between the two.

Separation of concerns: domain dataclasses = domain truth; api/ models = API
contract. Domain rules (non-empty name, non-negative price) are enforced by the
Product constructor, not duplicated here, so a bad price surfaces as the
invalid_product error rather than a generic validation error.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import User
from catalog.models import Product

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# bcrypt refuses inputs over 72 bytes. The character cap bounds request size;
# UserCreate also checks the UTF-8 length.
PASSWORD_MAX_LENGTH = 72


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class UserCreate(BaseModel):
    """Request body for POST /api/v1/users."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        """Reject passwords whose UTF-8 encoding exceeds bcrypt's 72-byte input."""
        if len(value.encode("utf-8")) > PASSWORD_MAX_LENGTH:
            raise ValueError(f"password must be at most {PASSWORD_MAX_LENGTH} bytes when UTF-8 encoded")
        return value


class TokenRequest(BaseModel):
    """Request body for POST /api/v1/users/generate_token."""

    email: str = Field(max_length=320)
    password: str = Field(max_length=PASSWORD_MAX_LENGTH)


class ProductInput(BaseModel):
    """Request body for POST /api/v1/products and PUT /api/v1/products/{id}."""

    name: str
    price: Decimal


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public view of a user. The password hash is never part of it."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=str(user.id), name=user.name, email=user.email)


class TokenResponse(BaseModel):
    """Response body for POST /api/v1/users/generate_token."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class ProductResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: Decimal
    created_at: datetime

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        """Factory Method -- the mapping lives beside the output model."""
        return cls(
            id=str(product.id),
            name=product.name,
            price=product.price,
            created_at=product.created_at,
        )


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
