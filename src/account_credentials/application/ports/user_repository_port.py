"""Port for user account persistence used by registration and login flows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from account_credentials.domain.auth.gender import Gender


class DuplicateUserEmailError(ValueError):
    """Raised when a user row with the same normalized email already exists."""

    def __init__(self, *, email: str) -> None:
        super().__init__(f"email already registered: {email}")
        self.email = email


@dataclass(frozen=True)
class UserRecord:
    """User persistence model.

    `password_hash` is the opaque credential record; it is stored and
    returned unmodified.
    """

    user_id: UUID
    email: str
    password_hash: str
    first_name: str
    last_name: str
    phone: str | None
    birth_date: str | None
    gender: Gender | None
    bio: str | None
    avatar_url: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserCreateInput:
    """Insert payload for one new user row."""

    email: str
    password_hash: str
    first_name: str
    last_name: str
    phone: str | None = None
    birth_date: str | None = None
    gender: Gender | None = None
    bio: str | None = None


@dataclass(frozen=True)
class UserPreferencesInput:
    """Notification and privacy preferences chosen at registration."""

    newsletter: bool = False
    notifications: bool = False
    privacy_public: bool = False
    marketing_emails: bool = False


@dataclass(frozen=True)
class UserStats:
    """Aggregate counters shown on the account dashboard."""

    total_users: int
    preferences_count: int


class UserRepositoryPort(Protocol):
    """User repository contract."""

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email or None."""

    async def email_exists(self, *, email: str) -> bool:
        """Return whether a user row uses the normalized email."""

    async def create_user(
        self,
        payload: UserCreateInput,
        *,
        preferences: UserPreferencesInput | None = None,
    ) -> UserRecord:
        """Insert one user and optional preferences atomically; return the user row."""

    async def update_password_hash(self, *, user_id: UUID, password_hash: str) -> UserRecord | None:
        """Replace the stored credential record wholesale."""

    async def update_avatar_url(self, *, user_id: UUID, avatar_url: str) -> UserRecord | None:
        """Set avatar url and bump updated_at."""

    async def get_user_stats(self, *, user_id: UUID) -> UserStats:
        """Return total user count and preference rows for one user."""
