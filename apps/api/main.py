"""account-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from account_credentials.application.ports.password_hasher_port import PasswordHasherPort
from account_credentials.application.ports.user_repository_port import UserRepositoryPort
from account_credentials.application.services.account_service import AccountService
from account_credentials.application.services.auth_service import AuthService
from account_credentials.application.services.registration_service import RegistrationService
from account_credentials.config.settings import Settings, load_settings
from account_credentials.infrastructure.db.session import create_session_factory
from account_credentials.infrastructure.db.user_repository import SqlAlchemyUserRepository
from account_credentials.infrastructure.http.auth_router import (
    build_auth_router,
    validation_error_handler,
)
from account_credentials.infrastructure.logging import configure_logging
from account_credentials.infrastructure.security.password_hasher import Pbkdf2PasswordHasher

ACCOUNT_API_HOST = "0.0.0.0"
ACCOUNT_API_PORT = 8000
logger = logging.getLogger(__name__)


def build_password_hasher(settings: Settings) -> Pbkdf2PasswordHasher:
    """Build PBKDF2 hasher honoring the configured work-factor bounds."""

    return Pbkdf2PasswordHasher(
        iterations=settings.password_hash_iterations,
        min_iterations=settings.password_hash_min_iterations,
        max_iterations=settings.password_hash_max_iterations,
        salt_bytes=settings.password_salt_bytes,
    )


def build_user_repository(database_url: str) -> UserRepositoryPort:
    """Build user repository with SQLAlchemy session factory."""

    session_factory = create_session_factory(database_url)
    return SqlAlchemyUserRepository(session_factory)


def create_app(
    *,
    users: UserRepositoryPort | None = None,
    password_hasher: PasswordHasherPort | None = None,
    database_url: str | None = None,
) -> FastAPI:
    """Create FastAPI app for registration, login and account routes."""

    if users is None or password_hasher is None:
        settings = load_settings()
        configure_logging(level=settings.log_level)
        if password_hasher is None:
            password_hasher = build_password_hasher(settings)
        if users is None:
            users = build_user_repository(database_url or settings.database_url)

    assert users is not None
    assert password_hasher is not None

    app = FastAPI(title="account-api")
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(
        build_auth_router(
            registration_service=RegistrationService(users=users, password_hasher=password_hasher),
            auth_service=AuthService(users=users, password_hasher=password_hasher),
            account_service=AccountService(users=users, password_hasher=password_hasher),
        )
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("account_api_app_created")
    return app


def run_asgi_server(*, host: str = ACCOUNT_API_HOST, port: int = ACCOUNT_API_PORT) -> None:
    """Run account-api as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run account-api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
