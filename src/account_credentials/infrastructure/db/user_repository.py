"""SQLAlchemy adapter for user account persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from account_credentials.application.ports.user_repository_port import (
    DuplicateUserEmailError,
    UserCreateInput,
    UserPreferencesInput,
    UserRecord,
    UserRepositoryPort,
    UserStats,
)
from account_credentials.domain.auth.gender import Gender
from account_credentials.infrastructure.db.metadata import user_preferences, users

_USER_COLUMNS = (
    users.c.id,
    users.c.email,
    users.c.password_hash,
    users.c.first_name,
    users.c.last_name,
    users.c.phone,
    users.c.birth_date,
    users.c.gender,
    users.c.bio,
    users.c.avatar_url,
    users.c.created_at,
    users.c.updated_at,
)


def _is_duplicate_email_error(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "uq_users_email" in message or "users.email" in message


class SqlAlchemyUserRepository(UserRepositoryPort):
    """User repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

        statement = sa.select(*_USER_COLUMNS).where(users.c.id == user_id).limit(1)
        return await self._fetch_one(statement)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email or None."""

        statement = sa.select(*_USER_COLUMNS).where(users.c.email == email).limit(1)
        return await self._fetch_one(statement)

    async def email_exists(self, *, email: str) -> bool:
        statement = sa.select(users.c.id).where(users.c.email == email).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return result.first() is not None

    async def create_user(
        self,
        payload: UserCreateInput,
        *,
        preferences: UserPreferencesInput | None = None,
    ) -> UserRecord:
        """Insert one user and optional preferences row in a single transaction."""

        user_id = uuid4()
        user_statement = sa.insert(users).values(
            id=user_id,
            email=payload.email,
            password_hash=payload.password_hash,
            first_name=payload.first_name,
            last_name=payload.last_name,
            phone=payload.phone,
            birth_date=payload.birth_date,
            gender=payload.gender.value if payload.gender is not None else None,
            bio=payload.bio,
        )

        async with self._session_factory() as session:
            try:
                async with session.begin():
                    await session.execute(user_statement)
                    if preferences is not None:
                        await session.execute(
                            sa.insert(user_preferences).values(
                                id=uuid4(),
                                user_id=user_id,
                                newsletter=preferences.newsletter,
                                notifications=preferences.notifications,
                                privacy_public=preferences.privacy_public,
                                marketing_emails=preferences.marketing_emails,
                            )
                        )
            except IntegrityError as error:
                if _is_duplicate_email_error(error):
                    raise DuplicateUserEmailError(email=payload.email) from error
                raise

        created = await self.get_by_id(user_id=user_id)
        if created is None:  # pragma: no cover - row committed above.
            raise LookupError(f"user not found after insert: {user_id}")
        return created

    async def update_password_hash(self, *, user_id: UUID, password_hash: str) -> UserRecord | None:
        """Replace the stored credential record wholesale."""

        return await self._update_user(user_id=user_id, password_hash=password_hash)

    async def update_avatar_url(self, *, user_id: UUID, avatar_url: str) -> UserRecord | None:
        return await self._update_user(user_id=user_id, avatar_url=avatar_url)

    async def get_user_stats(self, *, user_id: UUID) -> UserStats:
        total_statement = sa.select(sa.func.count()).select_from(users)
        preferences_statement = (
            sa.select(sa.func.count())
            .select_from(user_preferences)
            .where(user_preferences.c.user_id == user_id)
        )

        async with self._session_factory() as session:
            total_users = (await session.execute(total_statement)).scalar_one()
            preferences_count = (await session.execute(preferences_statement)).scalar_one()

        return UserStats(
            total_users=int(total_users),
            preferences_count=int(preferences_count),
        )

    async def _update_user(self, *, user_id: UUID, **values: object) -> UserRecord | None:
        statement = (
            sa.update(users)
            .where(users.c.id == user_id)
            .values(**values, updated_at=sa.func.current_timestamp())
        )

        async with self._session_factory() as session:
            result = cast(CursorResult[Any], await session.execute(statement))
            await session.commit()

        if int(result.rowcount or 0) != 1:
            return None
        return await self.get_by_id(user_id=user_id)

    async def _fetch_one(self, statement: sa.Select[Any]) -> UserRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)


def _as_uuid(raw: object) -> UUID:
    return raw if isinstance(raw, UUID) else UUID(str(raw))


def _to_user_record(row: sa.RowMapping) -> UserRecord:
    raw_gender = row["gender"]
    return UserRecord(
        user_id=_as_uuid(row["id"]),
        email=cast(str, row["email"]),
        password_hash=cast(str, row["password_hash"]),
        first_name=cast(str, row["first_name"]),
        last_name=cast(str, row["last_name"]),
        phone=cast(str | None, row["phone"]),
        birth_date=cast(str | None, row["birth_date"]),
        gender=Gender(cast(str, raw_gender)) if raw_gender is not None else None,
        bio=cast(str | None, row["bio"]),
        avatar_url=cast(str | None, row["avatar_url"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
