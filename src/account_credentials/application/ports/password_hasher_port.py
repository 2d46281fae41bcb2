"""Port for password hashing and verification."""

from __future__ import annotations

from typing import Protocol


class PasswordHasherPort(Protocol):
    """Password hashing/verification contract."""

    def hash_password(self, password: str) -> str:
        """Hash plaintext password into a self-describing stored record."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Verify plaintext password against stored record, failing closed."""

    def needs_rehash(self, password_hash: str) -> bool:
        """Return whether a stored record should be superseded by a fresh one."""
