"""Unit tests for the domain dataclasses -- Product validation and User.register()."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from auth.models import User
from auth.passwords import verify_password
from catalog.models import Product
from core.errors import InvalidProduct
from core.identifier import new_id


class TestProduct:
    def test_new_assigns_id_and_timestamp(self) -> None:
        before = datetime.now(timezone.utc)
        product = Product.new("Keyboard", "49.90")
        assert product.id is not None
        assert product.price == Decimal("49.90")
        assert before <= product.created_at <= datetime.now(timezone.utc)

    def test_zero_price_is_allowed(self) -> None:
        assert Product.new("Sample", 0).price == Decimal("0")

    def test_float_price_keeps_its_decimal_form(self) -> None:
        assert Product.new("Mouse", 9.99).price == Decimal("9.99")

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name_rejected(self, name) -> None:
        with pytest.raises(InvalidProduct):
            Product.new(name, 10)

    @pytest.mark.parametrize("price", [-1, "-0.01", Decimal("-5")])
    def test_negative_price_rejected(self, price) -> None:
        with pytest.raises(InvalidProduct):
            Product.new("Thing", price)

    @pytest.mark.parametrize("price", ["abc", None, True, "NaN", float("inf")])
    def test_non_numeric_price_rejected(self, price) -> None:
        with pytest.raises(InvalidProduct):
            Product.new("Thing", price)

    def test_naive_timestamp_is_treated_as_utc(self) -> None:
        product = Product(id=new_id(), name="Lamp", price=Decimal("1"), created_at=datetime(2024, 1, 1))
        assert product.created_at.tzinfo is timezone.utc


class TestUser:
    def test_register_hashes_password(self) -> None:
        user = User.register("Ada", "ada@example.com", "secret")
        assert user.password_hash != "secret"
        assert verify_password("secret", user.password_hash)

    def test_register_assigns_fresh_ids(self) -> None:
        a = User.register("A", "a@example.com", "pw")
        b = User.register("B", "b@example.com", "pw")
        assert a.id != b.id

    def test_repr_hides_password_hash(self) -> None:
        user = User.register("Ada", "ada@example.com", "secret")
        assert user.password_hash not in repr(user)
        assert "secret" not in repr(user)
