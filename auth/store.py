"""
auth/store.py -- SQLAlchemy Core persistence layer for users.

Pattern: Repository + Data Mapper (same as catalog/store.py).
UserRepository is the contract every handler depends on; UserStore is the
durable implementation and _row_to_user is the mapper. Route code never
touches SQL directly, and any object with the same three methods (such as the
in-memory double in tests/fakes.py) can stand in for UserStore.

Security:
  All queries use bound parameters. No f-strings in SQL.
  users.email carries a UNIQUE constraint; the database, not this module,
  decides whether an email is taken, so concurrent registrations cannot both
  succeed.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import Column, MetaData, String, Table, Text, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import User
from core.database import make_engine
from core.errors import DuplicateEmail, NotFound, StorageError
from core.identifier import Identifier, parse_id

logger = logging.getLogger("catalogapi.auth.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_users = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("email", String(320), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
)


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class UserRepository(Protocol):
    def create(self, user: User) -> None: ...

    def find_by_id(self, user_id: Identifier) -> User: ...

    def find_by_email(self, email: str) -> User: ...


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Durable UserRepository backed by SQLAlchemy Core.

    Usage:
        store = UserStore("sqlite:///catalogapi.db")
        store.create(User.register("Ada", "ada@example.com", "secret"))
        user = store.find_by_email("ada@example.com")
        store.close()
    """

    def __init__(self, db_url: str, **engine_kwargs) -> None:
        self.engine: Engine = make_engine(db_url, **engine_kwargs)
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not initialize users table: {type(exc).__name__}") from exc

    def create(self, user: User) -> None:
        """Insert a new user.

        Raises DuplicateEmail when the email is already registered and
        StorageError on any other database failure.
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(
                    _users.insert().values(
                        id=str(user.id),
                        name=user.name,
                        email=user.email,
                        password_hash=user.password_hash,
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            if self._email_taken(user.email):
                raise DuplicateEmail() from exc
            raise StorageError(f"User insert rejected: {type(exc).__name__}") from exc
        except SQLAlchemyError as exc:
            logger.error("User insert failed: %s", type(exc).__name__)
            raise StorageError() from exc

    def find_by_id(self, user_id: Identifier) -> User:
        """Look up a user by identifier. Raises NotFound if absent."""
        row = self._fetch_one(_users.select().where(_users.c.id == str(user_id)))
        if row is None:
            raise NotFound(f"User {user_id} not found.")
        return _row_to_user(row)

    def find_by_email(self, email: str) -> User:
        """Look up a user by exact email (case-sensitive). Raises NotFound if absent."""
        row = self._fetch_one(_users.select().where(_users.c.email == email))
        if row is None:
            raise NotFound("User not found.")
        return _row_to_user(row)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def close(self) -> None:
        self.engine.dispose()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fetch_one(self, stmt):
        try:
            with self.engine.connect() as conn:
                return conn.execute(stmt).fetchone()
        except SQLAlchemyError as exc:
            logger.error("User query failed: %s", type(exc).__name__)
            raise StorageError() from exc

    def _email_taken(self, email: str) -> bool:
        return self._fetch_one(_users.select().where(_users.c.email == email)) is not None


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=parse_id(row.id),
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
    )
