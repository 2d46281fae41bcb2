"""Application service for signed-in account maintenance."""

from __future__ import annotations

import asyncio
import logging
from uuid import UUID

from account_credentials.application.ports.password_hasher_port import PasswordHasherPort
from account_credentials.application.ports.user_repository_port import (
    UserRecord,
    UserRepositoryPort,
    UserStats,
)
from account_credentials.application.services.registration_service import (
    require_strong_password,
)

logger = logging.getLogger(__name__)


class UserNotFoundError(LookupError):
    """Raised when a target user cannot be found for one account action."""

    def __init__(self, *, user_id: UUID) -> None:
        super().__init__(f"user not found: {user_id}")
        self.user_id = user_id


class InvalidCurrentPasswordError(PermissionError):
    """Raised when an account change is attempted with the wrong current password."""

    def __init__(self) -> None:
        super().__init__("current password is incorrect")


class AccountService:
    """Expose password change, avatar and dashboard stats use-cases."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    async def change_password(
        self,
        *,
        user_id: UUID,
        current_password: str,
        new_password: str,
    ) -> UserRecord:
        """Replace the stored credential record after confirming the current one."""

        await self._require_current_password(
            user_id=user_id,
            current_password=current_password,
            action="password_change",
        )
        require_strong_password(new_password)

        new_hash = await asyncio.to_thread(self._password_hasher.hash_password, new_password)
        updated = await self._users.update_password_hash(user_id=user_id, password_hash=new_hash)
        if updated is None:  # pragma: no cover - target already loaded.
            raise UserNotFoundError(user_id=user_id)
        logger.info("password_changed user_id=%s", user_id)
        return updated

    async def update_avatar(
        self,
        *,
        user_id: UUID,
        current_password: str,
        avatar_url: str,
    ) -> UserRecord:
        """Replace the avatar URL once the caller proves they hold the password."""

        await self._require_current_password(
            user_id=user_id,
            current_password=current_password,
            action="avatar_update",
        )
        updated = await self._users.update_avatar_url(user_id=user_id, avatar_url=avatar_url)
        if updated is None:  # pragma: no cover - target already loaded.
            raise UserNotFoundError(user_id=user_id)
        return updated

    async def get_user_stats(self, *, user_id: UUID) -> UserStats:
        """Return dashboard counters for one existing user."""

        await self._require_existing_user(user_id=user_id)
        return await self._users.get_user_stats(user_id=user_id)

    async def _require_existing_user(self, *, user_id: UUID) -> UserRecord:
        target = await self._users.get_by_id(user_id=user_id)
        if target is None:
            raise UserNotFoundError(user_id=user_id)
        return target

    async def _require_current_password(
        self,
        *,
        user_id: UUID,
        current_password: str,
        action: str,
    ) -> UserRecord:
        user = await self._require_existing_user(user_id=user_id)
        is_valid = await asyncio.to_thread(
            self._password_hasher.verify_password,
            password=current_password,
            password_hash=user.password_hash,
        )
        if not is_valid:
            logger.info("%s_rejected reason=invalid_current user_id=%s", action, user_id)
            raise InvalidCurrentPasswordError()
        return user
