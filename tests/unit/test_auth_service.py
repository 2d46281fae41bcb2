from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from account_credentials.application.ports.user_repository_port import UserRecord
from account_credentials.application.services.auth_service import AuthOutcome, AuthService
from account_credentials.infrastructure.security.password_hasher import Pbkdf2PasswordHasher


@dataclass
class FakeUserRepository:
    user: UserRecord | None
    lookups: list[str] = field(default_factory=list)
    password_updates: list[tuple[UUID, str]] = field(default_factory=list)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        self.lookups.append(email)
        if self.user is None or self.user.email != email:
            return None
        return self.user

    async def update_password_hash(self, *, user_id: UUID, password_hash: str) -> UserRecord | None:
        self.password_updates.append((user_id, password_hash))
        assert self.user is not None
        self.user = replace(self.user, password_hash=password_hash)
        return self.user


class FakePasswordHasher:
    def __init__(self, *, should_verify: bool, should_rehash: bool = False) -> None:
        self.should_verify = should_verify
        self.should_rehash = should_rehash
        self.verify_calls: list[tuple[str, str]] = []
        self.hash_calls: list[str] = []

    def hash_password(self, password: str) -> str:
        self.hash_calls.append(password)
        return f"hashed::{password}"

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        self.verify_calls.append((password, password_hash))
        return self.should_verify

    def needs_rehash(self, password_hash: str) -> bool:
        return self.should_rehash


def _user(*, password_hash: str = "hashed::pw") -> UserRecord:
    now = datetime.now(tz=UTC)
    return UserRecord(
        user_id=uuid4(),
        email="alice@example.org",
        password_hash=password_hash,
        first_name="Alice",
        last_name="Liddell",
        phone=None,
        birth_date=None,
        gender=None,
        bio=None,
        avatar_url=None,
        created_at=now,
        updated_at=now,
    )


@pytest.mark.asyncio
async def test_authenticate_success_returns_user() -> None:
    user = _user()
    users = FakeUserRepository(user=user)
    hasher = FakePasswordHasher(should_verify=True)
    service = AuthService(users=users, password_hasher=hasher)

    result = await service.authenticate(email=" Alice@Example.org", password="pw")

    assert result.outcome is AuthOutcome.SUCCESS
    assert result.user == user
    assert users.lookups == ["alice@example.org"]
    assert hasher.verify_calls == [("pw", "hashed::pw")]
    assert users.password_updates == []


@pytest.mark.asyncio
async def test_authenticate_wrong_password_is_invalid_credentials() -> None:
    users = FakeUserRepository(user=_user())
    hasher = FakePasswordHasher(should_verify=False)
    service = AuthService(users=users, password_hasher=hasher)

    result = await service.authenticate(email="alice@example.org", password="wrong")

    assert result.outcome is AuthOutcome.INVALID_CREDENTIALS
    assert result.user is None


@pytest.mark.asyncio
async def test_authenticate_unknown_email_uses_dummy_record_built_at_startup() -> None:
    users = FakeUserRepository(user=None)
    hasher = FakePasswordHasher(should_verify=True)
    service = AuthService(users=users, password_hasher=hasher)
    assert len(hasher.hash_calls) == 1

    first = await service.authenticate(email="ghost@example.org", password="pw")
    second = await service.authenticate(email="ghost@example.org", password="pw")

    assert first.outcome is AuthOutcome.INVALID_CREDENTIALS
    assert second.outcome is AuthOutcome.INVALID_CREDENTIALS
    assert first.user is None
    assert len(hasher.verify_calls) == 2
    assert len(hasher.hash_calls) == 1
    assert hasher.verify_calls[0][1] == hasher.verify_calls[1][1]


@pytest.mark.asyncio
async def test_authenticate_supersedes_outdated_record_on_success() -> None:
    user = _user(password_hash="old-record")
    users = FakeUserRepository(user=user)
    hasher = FakePasswordHasher(should_verify=True, should_rehash=True)
    service = AuthService(users=users, password_hasher=hasher)

    result = await service.authenticate(email=user.email, password="pw")

    assert result.outcome is AuthOutcome.SUCCESS
    assert users.password_updates == [(user.user_id, "hashed::pw")]
    assert result.user is not None
    assert result.user.password_hash == "hashed::pw"


@pytest.mark.asyncio
async def test_authenticate_with_real_hasher_rejects_case_changed_password() -> None:
    hasher = Pbkdf2PasswordHasher(iterations=1_000, min_iterations=1_000)
    user = _user(password_hash=hasher.hash_password("Test123!@#"))
    service = AuthService(users=FakeUserRepository(user=user), password_hasher=hasher)

    accepted = await service.authenticate(email=user.email, password="Test123!@#")
    rejected = await service.authenticate(email=user.email, password="test123!@#")

    assert accepted.outcome is AuthOutcome.SUCCESS
    assert rejected.outcome is AuthOutcome.INVALID_CREDENTIALS


@pytest.mark.asyncio
async def test_authenticate_corrupt_record_is_indistinguishable_from_wrong_password() -> None:
    hasher = Pbkdf2PasswordHasher(iterations=1_000, min_iterations=1_000)
    user = _user(password_hash="not-a-valid-record")
    service = AuthService(users=FakeUserRepository(user=user), password_hasher=hasher)

    result = await service.authenticate(email=user.email, password="anything")

    assert result.outcome is AuthOutcome.INVALID_CREDENTIALS
    assert result.user is None
