"""Contract tests for UserRepository implementations.

Every test runs against both the SQLAlchemy UserStore and the in-memory
double via the parametrized user_store fixture.
"""

import pytest

from auth.models import User
from auth.store import UserStore
from core.errors import DuplicateEmail, NotFound, StorageError
from core.identifier import new_id


def test_create_then_find_by_id_and_email(user_store) -> None:
    user = User.register("Ada", "ada@example.com", "secret")
    user_store.create(user)
    by_id = user_store.find_by_id(user.id)
    by_email = user_store.find_by_email("ada@example.com")
    assert by_id == by_email == user


def test_find_unknown(user_store) -> None:
    with pytest.raises(NotFound):
        user_store.find_by_id(new_id())
    with pytest.raises(NotFound):
        user_store.find_by_email("nobody@example.com")


def test_email_lookup_is_exact(user_store) -> None:
    user_store.create(User.register("Ada", "ada@example.com", "secret"))
    with pytest.raises(NotFound):
        user_store.find_by_email("ADA@example.com")


def test_duplicate_email_leaves_original_untouched(user_store) -> None:
    original = User.register("Ada", "ada@example.com", "secret")
    user_store.create(original)
    impostor = User.register("Mallory", "ada@example.com", "other")
    with pytest.raises(DuplicateEmail):
        user_store.create(impostor)

    stored = user_store.find_by_email("ada@example.com")
    assert stored.id == original.id
    assert stored.name == "Ada"
    assert stored.password_hash == original.password_hash
    with pytest.raises(NotFound):
        user_store.find_by_id(impostor.id)


def test_password_hash_is_stored_not_plaintext(user_store) -> None:
    user_store.create(User.register("Ada", "ada@example.com", "secret"))
    assert user_store.find_by_email("ada@example.com").password_hash != "secret"


def test_duplicate_id_is_a_storage_error() -> None:
    store = UserStore("sqlite:///:memory:")
    first = User.register("Ada", "ada@example.com", "secret")
    store.create(first)
    clash = User(id=first.id, name="Bob", email="bob@example.com", password_hash=first.password_hash)
    with pytest.raises(StorageError):
        store.create(clash)
    store.close()
