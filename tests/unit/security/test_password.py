"""
Unit tests for password hashing.
"""

from labnote.security.password import hash_password, unusable_password_hash, verify_password


def test_hash_and_verify():
    hashed = hash_password("radium-1898")
    assert hashed != "radium-1898"
    assert verify_password("radium-1898", hashed)
    assert not verify_password("polonium-1898", hashed)


def test_long_passwords_are_not_truncated():
    base = "a" * 80
    hashed = hash_password(base + "1")
    assert not verify_password(base + "2", hashed)


def test_unusable_hash_is_random():
    assert unusable_password_hash() != unusable_password_hash()
