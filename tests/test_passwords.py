# tests/test_passwords.py

import base64

import pytest

from taskly.services.passwords import KEY_BYTES, SALT_BYTES, PasswordHasher


def test_hash_has_salt_and_key_parts(hasher: PasswordHasher) -> None:
    stored = hasher.hash("secret1")
    salt_b64, key_b64 = stored.split(".")

    assert len(base64.b64decode(salt_b64)) == SALT_BYTES
    assert len(base64.b64decode(key_b64)) == KEY_BYTES


def test_hash_is_salted(hasher: PasswordHasher) -> None:
    assert hasher.hash("secret1") != hasher.hash("secret1")


def test_verify_accepts_right_password_only(hasher: PasswordHasher) -> None:
    stored = hasher.hash("secret1")

    assert hasher.verify("secret1", stored) is True
    assert hasher.verify("secret2", stored) is False
    assert hasher.verify("", stored) is False


@pytest.mark.parametrize(
    "stored",
    ["", "no-separator", "a.b.c", "!!!.???", "c2FsdA==.dG9vc2hvcnQ=", ".", None],
)
def test_verify_returns_false_for_malformed_hash(hasher: PasswordHasher, stored) -> None:
    assert hasher.verify("secret1", stored) is False


def test_work_factor_must_stay_fixed() -> None:
    stored = PasswordHasher(rounds=1).hash("secret1")

    assert PasswordHasher(rounds=2).verify("secret1", stored) is False


def test_rounds_must_be_positive() -> None:
    with pytest.raises(ValueError):
        PasswordHasher(rounds=0)


def test_dummy_hash_is_stable_and_matches_nothing_obvious(hasher: PasswordHasher) -> None:
    dummy = hasher.dummy_hash()

    assert hasher.dummy_hash() == dummy
    assert len(dummy.split(".")) == 2
    assert hasher.verify("secret1", dummy) is False
    assert hasher.verify("", dummy) is False
