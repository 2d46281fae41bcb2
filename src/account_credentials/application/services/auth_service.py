"""Application authentication service for credential verification."""

from __future__ import annotations

import asyncio
import logging
import secrets
from dataclasses import dataclass
from enum import StrEnum

from account_credentials.application.ports.password_hasher_port import PasswordHasherPort
from account_credentials.application.ports.user_repository_port import (
    UserRecord,
    UserRepositoryPort,
)

logger = logging.getLogger(__name__)


class AuthOutcome(StrEnum):
    """Supported authentication outcomes."""

    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass(frozen=True)
class AuthResult:
    """Authentication result model."""

    outcome: AuthOutcome
    user: UserRecord | None = None


class AuthService:
    """Authenticate email/password pairs against stored credential records.

    Unknown emails and wrong passwords produce the same outcome. Unknown
    emails are still checked against a throwaway record so both paths pay
    one key derivation.
    """

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._dummy_hash = password_hasher.hash_password(secrets.token_urlsafe(16))

    async def authenticate(self, *, email: str, password: str) -> AuthResult:
        """Authenticate user credentials and supersede outdated records on success."""

        normalized_email = email.strip().lower()
        user = await self._users.get_by_email(email=normalized_email)
        if user is None:
            await asyncio.to_thread(
                self._password_hasher.verify_password,
                password=password,
                password_hash=self._dummy_hash,
            )
            logger.info("login_failed reason=invalid_credentials email=%s", normalized_email)
            return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS, user=None)

        is_valid = await asyncio.to_thread(
            self._password_hasher.verify_password,
            password=password,
            password_hash=user.password_hash,
        )
        if not is_valid:
            logger.info(
                "login_failed reason=invalid_credentials user_id=%s email=%s",
                user.user_id,
                normalized_email,
            )
            return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS, user=None)

        if self._password_hasher.needs_rehash(user.password_hash):
            user = await self._rehash(user=user, password=password)

        logger.info("login_success user_id=%s", user.user_id)
        return AuthResult(outcome=AuthOutcome.SUCCESS, user=user)

    async def _rehash(self, *, user: UserRecord, password: str) -> UserRecord:
        fresh_hash = await asyncio.to_thread(self._password_hasher.hash_password, password)
        updated = await self._users.update_password_hash(
            user_id=user.user_id,
            password_hash=fresh_hash,
        )
        logger.info("credential_record_rehashed user_id=%s", user.user_id)
        return updated if updated is not None else user

