"""Pydantic models for registration, login and account HTTP contracts."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from account_credentials.application.ports.user_repository_port import UserRecord, UserStats
from account_credentials.domain.auth.gender import Gender
from account_credentials.domain.auth.password_policy import PasswordStrength


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


def require_utf8_encodable(value: str) -> str:
    """Reject strings that cannot be hashed, such as lone surrogates."""

    try:
        value.encode("utf-8")
    except UnicodeEncodeError as error:
        raise ValueError("password must be valid unicode text") from error
    return value


PasswordStr = Annotated[str, AfterValidator(require_utf8_encodable)]


class PreferencesPayload(StrictModel):
    """Opt-in flags submitted with the registration form."""

    newsletter: bool = False
    notifications: bool = False
    privacy_public: bool = False
    marketing_emails: bool = False


class RegisterRequest(StrictModel):
    """HTTP request model for account registration."""

    email: str = Field(min_length=1)
    password: PasswordStr
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: str | None = None
    birth_date: str | None = None
    gender: Gender | None = None
    bio: str | None = Field(default=None, max_length=500)
    preferences: PreferencesPayload | None = None


class LoginRequest(StrictModel):
    """HTTP request model for email/password login."""

    email: str
    password: PasswordStr


class ChangePasswordRequest(StrictModel):
    """HTTP request model for replacing the current password."""

    user_id: UUID
    current_password: PasswordStr
    new_password: PasswordStr


class PasswordStrengthRequest(StrictModel):
    """HTTP request model for live password strength feedback."""

    password: PasswordStr


class PasswordStrengthResponse(StrictModel):
    """HTTP response model for password strength feedback."""

    score: int
    feedback: list[str]
    is_strong: bool

    @classmethod
    def from_strength(cls, strength: PasswordStrength) -> PasswordStrengthResponse:
        return cls(
            score=strength.score,
            feedback=list(strength.feedback),
            is_strong=strength.is_strong,
        )


class PasswordSuggestionResponse(StrictModel):
    """HTTP response model for one generated password and its strength."""

    password: str
    strength: PasswordStrengthResponse


class AvatarUpdateRequest(StrictModel):
    """HTTP request model for setting one avatar url."""

    current_password: PasswordStr
    avatar_url: str = Field(min_length=1)


class UserProfileResponse(StrictModel):
    """Public user profile; never carries the credential record."""

    user_id: UUID
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    birth_date: str | None = None
    gender: Gender | None = None
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, user: UserRecord) -> UserProfileResponse:
        return cls(
            user_id=user.user_id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            birth_date=user.birth_date,
            gender=user.gender,
            bio=user.bio,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserStatsResponse(StrictModel):
    """HTTP response model for dashboard counters."""

    total_users: int
    preferences_count: int

    @classmethod
    def from_stats(cls, stats: UserStats) -> UserStatsResponse:
        return cls(total_users=stats.total_users, preferences_count=stats.preferences_count)


class OkResponse(StrictModel):
    """Generic acknowledgement body."""

    ok: bool = True
