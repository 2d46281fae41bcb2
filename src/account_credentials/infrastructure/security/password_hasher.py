"""PBKDF2-HMAC-SHA256 password hasher adapter."""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets

from account_credentials.application.ports.password_hasher_port import PasswordHasherPort
from account_credentials.domain.auth.credential_record import (
    ALGORITHM,
    DELIMITER,
    CredentialRecord,
    MalformedCredentialRecordError,
    parse_credential_record,
)

DEFAULT_ITERATIONS = 100_000
DEFAULT_MIN_ITERATIONS = 100_000
DEFAULT_MAX_ITERATIONS = 10_000_000
DEFAULT_SALT_BYTES = 16
DERIVED_KEY_BYTES = 32

logger = logging.getLogger(__name__)


class EntropySourceError(RuntimeError):
    """Raised when the secure random source cannot produce salt bytes."""


def generate_salt(length: int = DEFAULT_SALT_BYTES) -> str:
    """Return `length` bytes from the CSPRNG as lowercase hex."""

    if length < 1:
        raise ValueError("salt length must be positive")
    try:
        return secrets.token_bytes(length).hex()
    except (OSError, NotImplementedError) as error:
        raise EntropySourceError("secure random source unavailable") from error


def derive_hash(password: str, salt: str, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Derive the 64-char hex PBKDF2-HMAC-SHA256 digest for one password.

    The salt is fed to PBKDF2 as the UTF-8 bytes of its hex text, which is
    how every stored record has been produced.
    """

    if iterations < 1:
        raise ValueError("iterations must be positive")
    derived = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
        dklen=DERIVED_KEY_BYTES,
    )
    return derived.hex()


def create_record(
    password: str,
    *,
    iterations: int = DEFAULT_ITERATIONS,
    min_iterations: int = DEFAULT_MIN_ITERATIONS,
    salt_bytes: int = DEFAULT_SALT_BYTES,
) -> str:
    """Hash one password into an `algorithm$iterations$salt$digest` record."""

    if iterations < min_iterations:
        raise ValueError(
            f"iterations {iterations} below configured floor {min_iterations}"
        )
    salt = generate_salt(salt_bytes)
    record = CredentialRecord(
        algorithm=ALGORITHM,
        iterations=iterations,
        salt=salt,
        digest=derive_hash(password, salt, iterations),
    )
    return record.encode()


def verify_record(
    password: str,
    record: str,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> bool:
    """Return whether `password` matches `record`; never raises for bad records."""

    try:
        parsed = parse_credential_record(record)
    except MalformedCredentialRecordError as error:
        logger.warning("credential_record_rejected reason=%s", error.reason)
        return False
    if parsed.iterations > max_iterations:
        logger.warning(
            "credential_record_rejected reason=iterations above ceiling iterations=%s",
            parsed.iterations,
        )
        return False

    candidate = derive_hash(password, parsed.salt, parsed.iterations)
    return hmac.compare_digest(candidate.encode("ascii"), parsed.digest.encode("ascii"))


class Pbkdf2PasswordHasher(PasswordHasherPort):
    """Password hashing adapter using PBKDF2-HMAC-SHA256 records."""

    def __init__(
        self,
        *,
        iterations: int = DEFAULT_ITERATIONS,
        min_iterations: int = DEFAULT_MIN_ITERATIONS,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        salt_bytes: int = DEFAULT_SALT_BYTES,
    ) -> None:
        if min_iterations < 1:
            raise ValueError("min_iterations must be positive")
        if iterations < min_iterations:
            raise ValueError(
                f"iterations {iterations} below configured floor {min_iterations}"
            )
        if max_iterations < iterations:
            raise ValueError("max_iterations must not be below iterations")
        self._iterations = iterations
        self._min_iterations = min_iterations
        self._max_iterations = max_iterations
        self._salt_bytes = salt_bytes

    @property
    def iterations(self) -> int:
        return self._iterations

    def hash_password(self, password: str) -> str:
        return create_record(
            password,
            iterations=self._iterations,
            min_iterations=self._min_iterations,
            salt_bytes=self._salt_bytes,
        )

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        return verify_record(password, password_hash, max_iterations=self._max_iterations)

    def needs_rehash(self, password_hash: str) -> bool:
        """Return whether a parseable record is legacy-encoded or under-iterated."""

        try:
            parsed = parse_credential_record(password_hash)
        except MalformedCredentialRecordError:
            return False
        if password_hash.startswith(DELIMITER):
            return True
        return parsed.iterations < self._iterations
