"""Application service for self-service account registration."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from account_credentials.application.ports.password_hasher_port import PasswordHasherPort
from account_credentials.application.ports.user_repository_port import (
    DuplicateUserEmailError,
    UserCreateInput,
    UserPreferencesInput,
    UserRecord,
    UserRepositoryPort,
)
from account_credentials.domain.auth.credentials import (
    normalize_person_name,
    normalize_user_email,
)
from account_credentials.domain.auth.gender import Gender
from account_credentials.domain.auth.password_policy import evaluate_password_strength

logger = logging.getLogger(__name__)


class EmailAlreadyRegisteredError(ValueError):
    """Raised when registration targets an email that already has an account."""

    def __init__(self, *, email: str) -> None:
        super().__init__("email already registered")
        self.email = email


class WeakPasswordError(ValueError):
    """Raised when a new password fails the strength policy."""

    def __init__(self, *, feedback: tuple[str, ...]) -> None:
        super().__init__("password does not meet strength requirements")
        self.feedback = feedback


@dataclass(frozen=True)
class RegistrationInput:
    """Raw registration form values."""

    email: str
    password: str
    first_name: str
    last_name: str
    phone: str | None = None
    birth_date: str | None = None
    gender: Gender | None = None
    bio: str | None = None
    preferences: UserPreferencesInput | None = None


def require_strong_password(password: str) -> None:
    """Raise `WeakPasswordError` when the password fails the strength policy."""

    strength = evaluate_password_strength(password)
    if not strength.is_strong:
        raise WeakPasswordError(feedback=strength.feedback)


class RegistrationService:
    """Create accounts whose passwords are stored only as credential records."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    async def register(self, payload: RegistrationInput) -> UserRecord:
        """Validate, hash and persist one new account."""

        email = normalize_user_email(email=payload.email)
        first_name = normalize_person_name(value=payload.first_name, field="first_name")
        last_name = normalize_person_name(value=payload.last_name, field="last_name")
        require_strong_password(payload.password)

        if await self._users.email_exists(email=email):
            logger.info("registration_rejected reason=email_taken email=%s", email)
            raise EmailAlreadyRegisteredError(email=email)

        password_hash = await asyncio.to_thread(
            self._password_hasher.hash_password,
            payload.password,
        )
        try:
            user = await self._users.create_user(
                UserCreateInput(
                    email=email,
                    password_hash=password_hash,
                    first_name=first_name,
                    last_name=last_name,
                    phone=_blank_to_none(payload.phone),
                    birth_date=_blank_to_none(payload.birth_date),
                    gender=payload.gender,
                    bio=_blank_to_none(payload.bio),
                ),
                preferences=payload.preferences,
            )
        except DuplicateUserEmailError as error:
            logger.info("registration_rejected reason=email_taken email=%s", email)
            raise EmailAlreadyRegisteredError(email=email) from error

        logger.info("registration_success user_id=%s email=%s", user.user_id, email)
        return user


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
