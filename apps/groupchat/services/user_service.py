"""Account registration, password verification and username lookup.

Passwords are stored as salted PBKDF2-SHA256 digests in a single column:
``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>``.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from dataclasses import dataclass, field

from sqlmodel import Session, select

from groupchat.core.exceptions import AuthenticationError, ConflictError, GroupChatException
from groupchat.core.settings import settings
from groupchat.models.user import User

logger = logging.getLogger(__name__)

_HASH_SCHEME = "pbkdf2_sha256"
_SALT_BYTES = 16


def hash_password(password: str, *, iterations: int | None = None, salt: bytes | None = None) -> str:
    """Return an encoded salted hash for `password`."""

    rounds = iterations or settings.password_hash_iterations
    salt = salt if salt is not None else secrets.token_bytes(_SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return f"{_HASH_SCHEME}${rounds}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Check `password` against an encoded hash using a constant-time comparison."""

    try:
        scheme, rounds, salt_hex, digest_hex = encoded.split("$")
        iterations = int(rounds)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        logger.warning("Stored password hash has an unexpected format")
        return False
    if scheme != _HASH_SCHEME:
        return False
    candidate = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return secrets.compare_digest(candidate.hex(), digest_hex)


@dataclass
class UserService:
    """User CRUD plus the lookup-by-id directory used by the realtime path."""

    session: Session
    iterations: int = field(default_factory=lambda: settings.password_hash_iterations)

    def register(self, *, username: str, password: str) -> User:
        name = username.strip()
        if not name:
            raise GroupChatException("Username and password are required", code="missing_fields")
        if self.get_by_username(name) is not None:
            raise ConflictError("Username already taken", code="username_taken")

        user = User(username=name, password_hash=hash_password(password, iterations=self.iterations))
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        logger.info("Registered user id=%s", user.id)
        return user

    def authenticate(self, *, username: str, password: str) -> User:
        user = self.get_by_username(username.strip())
        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid username or password")
        return user

    def get_user(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        return self.session.exec(select(User).where(User.username == username)).first()

    def find_username_by_id(self, user_id: int) -> str | None:
        """Resolve a sender id to its display username, or None when unknown."""

        user = self.get_user(user_id)
        return user.username if user else None


__all__ = ["UserService", "hash_password", "verify_password"]
