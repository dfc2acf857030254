"""Tests for password hashing"""
from cafe_api.utils.auth import hash_password, verify_password


def test_hash_is_argon2_and_salted():
    first = hash_password("Secret123")
    second = hash_password("Secret123")

    assert first.startswith("$argon2id$")
    assert first != second
    assert "Secret123" not in first


def test_verify_password():
    stored = hash_password("Secret123")

    assert verify_password("Secret123", stored)
    assert not verify_password("secret123", stored)
    assert not verify_password("", stored)


def test_malformed_hash_never_verifies():
    assert not verify_password("Secret123", "")
    assert not verify_password("Secret123", "not-a-hash")
    assert not verify_password("Secret123", "pbkdf2_sha256$200000$salt$abcdef")
