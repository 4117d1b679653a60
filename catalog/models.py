"""
catalog/models.py -- Domain dataclass for the product catalog.

Product validates itself in __post_init__: a Product with an empty name or a
negative price cannot be constructed, so no store ever sees one. Everything
else (persistence, ordering, pagination) lives in catalog/store.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from core.errors import InvalidProduct
from core.identifier import Identifier, new_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Product:
    """A catalog item.

    price is normalized to Decimal on construction; floats go through str()
    first so 9.99 stays 9.99 rather than its binary approximation.
    created_at is set once and drives list ordering. Naive datetimes are
    taken to be UTC.
    """

    id: Identifier
    name: str
    price: Decimal
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidProduct("Product name is required.")
        self.price = _to_decimal(self.price)
        if self.price < 0:
            raise InvalidProduct("Product price must not be negative.")
        if self.created_at.tzinfo is None:
            self.created_at = self.created_at.replace(tzinfo=timezone.utc)

    @classmethod
    def new(cls, name: str, price: Decimal | float | int | str) -> Product:
        """Build a new Product with a fresh id and the current timestamp."""
        return cls(id=new_id(), name=name, price=price)


def _to_decimal(value) -> Decimal:
    if isinstance(value, bool):
        raise InvalidProduct("Product price must be a number.")
    if isinstance(value, float):
        value = str(value)
    try:
        price = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidProduct("Product price must be a number.") from None
    if not price.is_finite():
        raise InvalidProduct("Product price must be a finite number.")
    return price
