"""FastAPI router for registration, login and account maintenance endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from account_credentials.application.dto.auth_models import (
    AvatarUpdateRequest,
    ChangePasswordRequest,
    LoginRequest,
    OkResponse,
    PasswordStrengthRequest,
    PasswordStrengthResponse,
    PasswordSuggestionResponse,
    RegisterRequest,
    UserProfileResponse,
    UserStatsResponse,
)
from account_credentials.application.ports.user_repository_port import UserPreferencesInput
from account_credentials.application.services.account_service import (
    AccountService,
    InvalidCurrentPasswordError,
    UserNotFoundError,
)
from account_credentials.application.services.auth_service import AuthOutcome, AuthService
from account_credentials.application.services.registration_service import (
    EmailAlreadyRegisteredError,
    RegistrationInput,
    RegistrationService,
    WeakPasswordError,
)
from account_credentials.domain.auth.password_policy import (
    evaluate_password_strength,
    generate_random_password,
)

INVALID_CREDENTIALS_DETAIL = "invalid credentials"


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 422 field errors without the submitted values.

    Rejected values may be passwords or lone surrogates that cannot be encoded.
    """

    assert isinstance(exc, RequestValidationError)
    errors = [
        {
            "loc": list(error.get("loc", ())),
            "msg": error.get("msg", "validation failed"),
            "type": error.get("type", "value_error"),
        }
        for error in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": errors})


def build_auth_router(
    *,
    registration_service: RegistrationService,
    auth_service: AuthService,
    account_service: AccountService,
) -> APIRouter:
    """Build router exposing account registration, login and maintenance endpoints."""

    router = APIRouter(prefix="/auth", tags=["auth"])

    @router.post("/register", response_model=UserProfileResponse, status_code=201)
    async def register(payload: RegisterRequest) -> UserProfileResponse:
        preferences = None
        if payload.preferences is not None:
            preferences = UserPreferencesInput(**payload.preferences.model_dump())
        try:
            user = await registration_service.register(
                RegistrationInput(
                    email=payload.email,
                    password=payload.password,
                    first_name=payload.first_name,
                    last_name=payload.last_name,
                    phone=payload.phone,
                    birth_date=payload.birth_date,
                    gender=payload.gender,
                    bio=payload.bio,
                    preferences=preferences,
                )
            )
        except EmailAlreadyRegisteredError as error:
            raise HTTPException(status_code=409, detail=str(error)) from error
        except WeakPasswordError as error:
            raise HTTPException(
                status_code=400,
                detail={"message": str(error), "feedback": list(error.feedback)},
            ) from error
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return UserProfileResponse.from_record(user)

    @router.post("/login", response_model=UserProfileResponse)
    async def login(payload: LoginRequest) -> UserProfileResponse:
        result = await auth_service.authenticate(email=payload.email, password=payload.password)
        if result.outcome is not AuthOutcome.SUCCESS or result.user is None:
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS_DETAIL)
        return UserProfileResponse.from_record(result.user)

    @router.post("/password", response_model=OkResponse)
    async def change_password(payload: ChangePasswordRequest) -> OkResponse:
        try:
            await account_service.change_password(
                user_id=payload.user_id,
                current_password=payload.current_password,
                new_password=payload.new_password,
            )
        except UserNotFoundError as error:
            raise HTTPException(status_code=404, detail="user not found") from error
        except InvalidCurrentPasswordError as error:
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS_DETAIL) from error
        except WeakPasswordError as error:
            raise HTTPException(
                status_code=400,
                detail={"message": str(error), "feedback": list(error.feedback)},
            ) from error
        return OkResponse()

    @router.post("/password-strength", response_model=PasswordStrengthResponse)
    async def password_strength(payload: PasswordStrengthRequest) -> PasswordStrengthResponse:
        return PasswordStrengthResponse.from_strength(evaluate_password_strength(payload.password))

    @router.get("/password-suggestion", response_model=PasswordSuggestionResponse)
    async def password_suggestion() -> PasswordSuggestionResponse:
        password = generate_random_password()
        return PasswordSuggestionResponse(
            password=password,
            strength=PasswordStrengthResponse.from_strength(evaluate_password_strength(password)),
        )

    @router.get("/users/{user_id}/stats", response_model=UserStatsResponse)
    async def user_stats(user_id: UUID) -> UserStatsResponse:
        try:
            stats = await account_service.get_user_stats(user_id=user_id)
        except UserNotFoundError as error:
            raise HTTPException(status_code=404, detail="user not found") from error
        return UserStatsResponse.from_stats(stats)

    @router.put("/users/{user_id}/avatar", response_model=UserProfileResponse)
    async def update_avatar(user_id: UUID, payload: AvatarUpdateRequest) -> UserProfileResponse:
        try:
            user = await account_service.update_avatar(
                user_id=user_id,
                current_password=payload.current_password,
                avatar_url=payload.avatar_url,
            )
        except UserNotFoundError as error:
            raise HTTPException(status_code=404, detail="user not found") from error
        except InvalidCurrentPasswordError as error:
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS_DETAIL) from error
        return UserProfileResponse.from_record(user)

    return router
