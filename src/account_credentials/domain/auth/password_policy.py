"""Password strength rules and random password generation."""

from __future__ import annotations

import re
import secrets
from dataclasses import dataclass

RANDOM_PASSWORD_CHARSET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789!@#$%^&*"
)
MIN_PASSWORD_LENGTH = 8
LONG_PASSWORD_LENGTH = 12
MAX_STRENGTH_SCORE = 4


@dataclass(frozen=True)
class PasswordStrength:
    """Strength evaluation for one candidate password."""

    score: int
    feedback: tuple[str, ...]
    is_strong: bool


def evaluate_password_strength(password: str) -> PasswordStrength:
    """Score one password from 0 to 4 and explain the missing rules."""

    feedback: list[str] = []
    score = 0

    if len(password) >= MIN_PASSWORD_LENGTH:
        score += 1
    else:
        feedback.append(f"password must be at least {MIN_PASSWORD_LENGTH} characters")

    if len(password) >= LONG_PASSWORD_LENGTH:
        score += 1

    if re.search(r"[a-z]", password):
        score += 1
    else:
        feedback.append("password must contain a lowercase letter")

    if re.search(r"[A-Z]", password):
        score += 1
    else:
        feedback.append("password must contain an uppercase letter")

    if re.search(r"[0-9]", password):
        score += 1
    else:
        feedback.append("password must contain a digit")

    if re.search(r"[^a-zA-Z0-9]", password):
        score += 1
    else:
        feedback.append("password must contain a special character")

    return PasswordStrength(
        score=min(score, MAX_STRENGTH_SCORE),
        feedback=tuple(feedback),
        is_strong=score >= MAX_STRENGTH_SCORE and len(password) >= MIN_PASSWORD_LENGTH,
    )


def generate_random_password(length: int = 12) -> str:
    """Return a random password drawn from the CSPRNG."""

    if length < 1:
        raise ValueError("password length must be positive")
    return "".join(secrets.choice(RANDOM_PASSWORD_CHARSET) for _ in range(length))
