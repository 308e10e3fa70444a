from typing import Optional

import bcrypt

from core.errors import HashingError

# bcrypt work factor when Settings does not say otherwise
DEFAULT_COST = 12


class PasswordHash:
    """A bcrypt password hash. Only the hash is kept, never the plaintext."""

    def __init__(self, hash: Optional[str] = None, cost: int = DEFAULT_COST):
        self.hash = hash
        self.cost = cost

    def set(self, plaintext: str) -> str:
        """Hash ``plaintext`` with a fresh salt and store the result."""
        try:
            hashed = bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=self.cost))
        except (ValueError, TypeError) as e:
            raise HashingError(f"failed to hash password: {e}") from e

        self.hash = hashed.decode("utf-8")
        return self.hash

    def matches(self, plaintext: str) -> bool:
        """
        Check ``plaintext`` against the stored hash.

        A wrong password returns False. A missing or malformed stored hash
        raises HashingError.
        """
        if not self.hash:
            raise HashingError("no password hash set")

        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), self.hash.encode("utf-8"))
        except (ValueError, TypeError) as e:
            raise HashingError(f"malformed password hash: {e}") from e


def hash_password(plaintext: str, cost: int = DEFAULT_COST) -> str:
    return PasswordHash(cost=cost).set(plaintext)


def verify_password(plaintext: str, password_hash: str) -> bool:
    return PasswordHash(password_hash).matches(plaintext)
