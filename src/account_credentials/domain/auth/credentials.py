"""Shared normalization helpers for user registration inputs."""

from __future__ import annotations


def normalize_user_email(*, email: str) -> str:
    """Normalize one user email and reject blank or malformed values."""

    normalized = email.strip().lower()
    if not normalized:
        raise ValueError("email cannot be blank")
    local_part, separator, domain = normalized.partition("@")
    if not separator or not local_part or not domain or "@" in domain:
        raise ValueError("email must look like name@domain")
    return normalized


def normalize_person_name(*, value: str, field: str) -> str:
    """Strip one profile name and reject blank values."""

    normalized = value.strip()
    if not normalized:
        raise ValueError(f"{field} cannot be blank")
    return normalized
