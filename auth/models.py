"""
auth/models.py -- Domain dataclass for authentication entities.

Pattern: Data class. Mirrors catalog/models.py -- dataclasses own domain
shape; stores and routes do the work. The one piece of logic here is
User.register(), which turns a plaintext password into a hash before the
User exists, so no User instance ever holds a plaintext password.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from auth.passwords import hash_password
from core.identifier import Identifier, new_id


@dataclass
class User:
    """A registered identity.

    email is the secondary lookup key and is unique across users (enforced by
    the store). password_hash is excluded from repr so it cannot leak into
    logs or tracebacks, and the API response models never include it.
    """

    id: Identifier
    name: str
    email: str
    password_hash: str = field(repr=False)

    @classmethod
    def register(cls, name: str, email: str, password: str) -> User:
        """Build a new User with a fresh id, hashing the password immediately.

        Raises CredentialError if hashing fails.
        """
        return cls(
            id=new_id(),
            name=name,
            email=email,
            password_hash=hash_password(password),
        )
