from __future__ import annotations

import logging

import pytest

from account_credentials.infrastructure.security import password_hasher as hasher_module
from account_credentials.infrastructure.security.password_hasher import (
    EntropySourceError,
    Pbkdf2PasswordHasher,
    create_record,
    derive_hash,
    generate_salt,
    verify_record,
)

FAST_ITERATIONS = 1_000


def _fast_hasher(*, iterations: int = FAST_ITERATIONS) -> Pbkdf2PasswordHasher:
    return Pbkdf2PasswordHasher(iterations=iterations, min_iterations=FAST_ITERATIONS)


def test_generate_salt_returns_lowercase_hex_of_requested_length() -> None:
    salt = generate_salt()

    assert len(salt) == 32
    assert salt == salt.lower()
    int(salt, 16)
    assert len(generate_salt(24)) == 48


def test_generate_salt_rejects_non_positive_length() -> None:
    with pytest.raises(ValueError):
        generate_salt(0)


def test_generate_salt_propagates_entropy_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def _broken(length: int) -> bytes:
        raise OSError("no entropy")

    monkeypatch.setattr(hasher_module.secrets, "token_bytes", _broken)

    with pytest.raises(EntropySourceError):
        generate_salt()
    with pytest.raises(EntropySourceError):
        create_record("pw", iterations=FAST_ITERATIONS, min_iterations=FAST_ITERATIONS)


def test_derive_hash_is_deterministic_and_fixed_length() -> None:
    salt = "00112233445566778899aabbccddeeff"

    first = derive_hash("secret", salt, FAST_ITERATIONS)
    second = derive_hash("secret", salt, FAST_ITERATIONS)

    assert first == second
    assert len(first) == 64
    assert derive_hash("secret", salt, FAST_ITERATIONS + 1) != first
    assert derive_hash("secret", "ff" + salt[2:], FAST_ITERATIONS) != first


def test_derive_hash_matches_pbkdf2_reference_vector() -> None:
    # RFC 7914 section 11 PBKDF2-HMAC-SHA256 vector, truncated to 32 bytes.
    digest = derive_hash("passwd", "salt", 1)

    assert digest == "55ac046e56e3089fec1691c22544b605f94185216dde0465e68b9d57c20dacbc"


def test_derive_hash_rejects_non_positive_iterations() -> None:
    with pytest.raises(ValueError):
        derive_hash("secret", "abcd", 0)


def test_create_record_encodes_four_fields_with_default_work_factor() -> None:
    record = create_record("Test123!@#")

    algorithm, iterations, salt, digest = record.split("$")
    assert algorithm == "pbkdf2"
    assert iterations == "100000"
    assert len(salt) == 32
    assert len(digest) == 64


def test_create_record_rejects_iterations_below_floor() -> None:
    with pytest.raises(ValueError):
        create_record("pw", iterations=10, min_iterations=1_000)


def test_same_password_produces_distinct_records_that_both_verify() -> None:
    hasher = _fast_hasher()

    first = hasher.hash_password("same-password")
    second = hasher.hash_password("same-password")

    assert first != second
    assert first.split("$")[2] != second.split("$")[2]
    assert hasher.verify_password(password="same-password", password_hash=first) is True
    assert hasher.verify_password(password="same-password", password_hash=second) is True


def test_wrong_password_fails_verification() -> None:
    hasher = _fast_hasher()
    record = hasher.hash_password("correct")

    assert hasher.verify_password(password="wrong", password_hash=record) is False
    assert "correct" not in record


def test_empty_password_is_hashed_and_verified() -> None:
    hasher = _fast_hasher()
    record = hasher.hash_password("")

    assert len(record.split("$")) == 4
    assert hasher.verify_password(password="", password_hash=record) is True
    assert hasher.verify_password(password="anything-else", password_hash=record) is False


def test_digest_length_does_not_depend_on_password_length() -> None:
    hasher = _fast_hasher()

    short_digest = hasher.hash_password("a").split("$")[3]
    long_digest = hasher.hash_password("x" * 10_000).split("$")[3]

    assert len(short_digest) == len(long_digest) == 64


@pytest.mark.parametrize(
    "record",
    [
        "not-a-valid-record",
        "",
        "pbkdf2$1000$abcd",
        "bcrypt$1000$abcd$" + "0" * 64,
        "pbkdf2$zero$abcd$" + "0" * 64,
        "pbkdf2$0$abcd$" + "0" * 64,
        "pbkdf2$1000$ABCD$" + "0" * 64,
        "pbkdf2$1000$abcd$" + "0" * 63,
        "pbkdf2$1000$abcd$" + "0" * 64 + "$extra",
        "pbkdf2$" + "9" * 5000 + "$abcd$" + "0" * 64,
        "pbkdf2$" + "1" * 11 + "$abcd$" + "0" * 64,
    ],
)
def test_malformed_records_verify_false_without_raising(record: str) -> None:
    assert verify_record("password", record) is False


def test_malformed_record_rejection_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        assert verify_record("hunter2-secret", "not-a-valid-record") is False

    assert any("credential_record_rejected" in message for message in caplog.messages)
    assert all("hunter2-secret" not in message for message in caplog.messages)


def test_records_above_iteration_ceiling_fail_closed() -> None:
    record = create_record("pw", iterations=FAST_ITERATIONS, min_iterations=FAST_ITERATIONS)

    assert verify_record("pw", record, max_iterations=FAST_ITERATIONS - 1) is False
    assert verify_record("pw", record, max_iterations=FAST_ITERATIONS) is True


def test_verify_uses_iteration_count_embedded_in_record() -> None:
    old_record = _fast_hasher(iterations=FAST_ITERATIONS).hash_password("pw")
    newer_hasher = _fast_hasher(iterations=FAST_ITERATIONS * 2)

    assert newer_hasher.verify_password(password="pw", password_hash=old_record) is True
    assert newer_hasher.needs_rehash(old_record) is True
    assert newer_hasher.needs_rehash(newer_hasher.hash_password("pw")) is False


def test_legacy_leading_delimiter_records_verify_and_need_rehash() -> None:
    hasher = _fast_hasher()
    record = hasher.hash_password("legacy-pw")

    legacy_record = "$" + record

    assert hasher.verify_password(password="legacy-pw", password_hash=legacy_record) is True
    assert hasher.verify_password(password="other", password_hash=legacy_record) is False
    assert hasher.needs_rehash(legacy_record) is True


def test_needs_rehash_is_false_for_malformed_records() -> None:
    assert _fast_hasher().needs_rehash("garbage") is False


def test_hasher_rejects_work_factor_below_floor() -> None:
    with pytest.raises(ValueError):
        Pbkdf2PasswordHasher(iterations=500, min_iterations=1_000)
    with pytest.raises(ValueError):
        Pbkdf2PasswordHasher(iterations=2_000, min_iterations=1_000, max_iterations=1_500)


def test_register_then_login_scenario_with_default_hasher() -> None:
    hasher = Pbkdf2PasswordHasher()

    record = hasher.hash_password("Test123!@#")

    fields = record.split("$")
    assert len(fields) == 4
    assert fields[0] == "pbkdf2"
    assert hasher.verify_password(password="Test123!@#", password_hash=record) is True
    assert hasher.verify_password(password="test123!@#", password_hash=record) is False
