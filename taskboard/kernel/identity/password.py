"""
Password hashing utilities using bcrypt.
"""

import base64
import hashlib
import secrets
from functools import cached_property
from typing import Optional

import bcrypt

from taskboard.config import get_settings

# Number of rounds for bcrypt hashing (12 is secure default)
BCRYPT_ROUNDS = 12


class PasswordHasher:
    """
    Salted, slow one-way password hashing.

    Each call to ``hash`` draws a fresh salt, so the same password never
    produces the same stored value twice. ``rounds`` is the bcrypt work
    factor (log2 of the iteration count).
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    @staticmethod
    def _digest_password(password: str) -> bytes:
        """
        Reduce a password to a fixed-size bcrypt input.

        bcrypt ignores everything past 72 bytes, so long passwords sharing a
        prefix would otherwise verify against each other. A base64 SHA-256
        digest is 44 bytes and never contains NUL.
        """
        digest = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(digest)

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string (``$2b$`` format, salt embedded)
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(self._digest_password(password), salt)
        return hashed.decode("utf-8")

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        bcrypt recomputes the hash with the embedded salt and compares in
        constant time. A malformed stored hash counts as a mismatch.

        Args:
            plain_password: Plain text password to verify
            hashed_password: Stored hashed password

        Returns:
            True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(
                self._digest_password(plain_password),
                hashed_password.encode("utf-8"),
            )
        except (ValueError, TypeError, AttributeError):
            return False

    def needs_rehash(self, hashed_password: str) -> bool:
        """
        Check if a password hash was made with a different work factor.

        Args:
            hashed_password: Existing password hash

        Returns:
            True if hash should be regenerated
        """
        # Format: $2b$XX$... where XX is the rounds
        parts = hashed_password.split("$")
        if len(parts) < 4:
            return True
        try:
            return int(parts[2]) != self.rounds
        except ValueError:
            return True

    @cached_property
    def dummy_hash(self) -> str:
        """
        Hash of a random secret nobody knows.

        Verifying against it costs the same as verifying a real account, so
        a sign-in for an unknown email takes as long as a wrong password.
        """
        return self.hash(secrets.token_urlsafe(32))


_password_hasher: Optional[PasswordHasher] = None


def get_password_hasher() -> PasswordHasher:
    """Get or create the default hasher, tuned from settings."""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = PasswordHasher(rounds=get_settings().bcrypt_rounds)
    return _password_hasher

