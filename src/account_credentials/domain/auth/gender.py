"""Profile gender values accepted at registration."""

from __future__ import annotations

from enum import StrEnum


class Gender(StrEnum):
    """Supported self-declared gender values."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
