"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    password_hash_iterations: PositiveInt = Field(
        default=100_000,
        validation_alias="PASSWORD_HASH_ITERATIONS",
    )
    password_hash_min_iterations: PositiveInt = Field(
        default=100_000,
        validation_alias="PASSWORD_HASH_MIN_ITERATIONS",
    )
    password_hash_max_iterations: PositiveInt = Field(
        default=10_000_000,
        validation_alias="PASSWORD_HASH_MAX_ITERATIONS",
    )
    password_salt_bytes: PositiveInt = Field(
        default=16,
        validation_alias="PASSWORD_SALT_BYTES",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @model_validator(mode="after")
    def _validate_iteration_bounds(self) -> "Settings":
        """Keep the work factor between the security floor and verify ceiling."""

        if self.password_hash_iterations < self.password_hash_min_iterations:
            raise ValueError("PASSWORD_HASH_ITERATIONS is below PASSWORD_HASH_MIN_ITERATIONS")
        if self.password_hash_max_iterations < self.password_hash_iterations:
            raise ValueError("PASSWORD_HASH_MAX_ITERATIONS is below PASSWORD_HASH_ITERATIONS")
        return self


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
