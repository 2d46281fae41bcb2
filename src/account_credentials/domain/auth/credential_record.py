"""Self-describing PBKDF2 credential record encoding."""

from __future__ import annotations

import re
from dataclasses import dataclass

ALGORITHM = "pbkdf2"
DELIMITER = "$"
DIGEST_HEX_LENGTH = 64
MAX_ITERATIONS_DIGITS = 10

_HEX_PATTERN = re.compile(r"[0-9a-f]+")
_DECIMAL_PATTERN = re.compile(r"[0-9]+")


class MalformedCredentialRecordError(ValueError):
    """Raised when one stored credential record cannot be parsed."""

    def __init__(self, *, reason: str) -> None:
        super().__init__(f"malformed credential record: {reason}")
        self.reason = reason


@dataclass(frozen=True)
class CredentialRecord:
    """Parsed `algorithm$iterations$salt$digest` credential record."""

    algorithm: str
    iterations: int
    salt: str
    digest: str

    def encode(self) -> str:
        """Render the record in its persisted four-field form."""

        return DELIMITER.join(
            (self.algorithm, str(self.iterations), self.salt, self.digest)
        )


def parse_credential_record(raw: str) -> CredentialRecord:
    """Parse one stored record, raising on any structural problem.

    Records written with a leading delimiter (`$pbkdf2$...`) are accepted
    as well as the four-field form.
    """

    if not isinstance(raw, str):
        raise MalformedCredentialRecordError(reason="record is not a string")

    parts = raw.split(DELIMITER)
    if len(parts) == 5 and parts[0] == "":
        parts = parts[1:]
    if len(parts) != 4:
        raise MalformedCredentialRecordError(reason=f"expected 4 fields, got {len(parts)}")

    algorithm, raw_iterations, salt, digest = parts
    if algorithm != ALGORITHM:
        raise MalformedCredentialRecordError(reason="unknown algorithm tag")
    if not _DECIMAL_PATTERN.fullmatch(raw_iterations):
        raise MalformedCredentialRecordError(reason="iterations is not a decimal integer")
    if len(raw_iterations) > MAX_ITERATIONS_DIGITS:
        raise MalformedCredentialRecordError(reason="iterations out of range")
    iterations = int(raw_iterations)
    if iterations < 1:
        raise MalformedCredentialRecordError(reason="iterations must be positive")
    if not _HEX_PATTERN.fullmatch(salt):
        raise MalformedCredentialRecordError(reason="salt is not lowercase hex")
    if len(digest) != DIGEST_HEX_LENGTH or not _HEX_PATTERN.fullmatch(digest):
        raise MalformedCredentialRecordError(reason="digest is not 64 lowercase hex chars")

    return CredentialRecord(
        algorithm=algorithm,
        iterations=iterations,
        salt=salt,
        digest=digest,
    )
