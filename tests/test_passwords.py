import pytest

from auth.passwords import DEFAULT_COST, PasswordHash, hash_password, verify_password
from core.errors import HashingError

COST = 4


def test_same_password_hashes_differently_and_both_verify():
    first = PasswordHash(cost=COST)
    second = PasswordHash(cost=COST)
    first.set("pa55word1234")
    second.set("pa55word1234")

    assert first.hash != second.hash
    assert first.matches("pa55word1234")
    assert second.matches("pa55word1234")


def test_wrong_password_does_not_match():
    password = PasswordHash(cost=COST)
    password.set("pa55word1234")

    assert password.matches("not-the-password") is False


def test_hash_never_contains_plaintext():
    hashed = hash_password("pa55word1234", cost=COST)

    assert "pa55word1234" not in hashed
    assert hashed.startswith("$2")


def test_cost_is_taken_from_the_caller():
    assert hash_password("pa55word1234", cost=COST).startswith("$2b$04$")
    assert PasswordHash().cost == DEFAULT_COST == 12


def test_malformed_stored_hash_raises():
    with pytest.raises(HashingError):
        verify_password("pa55word1234", "not-a-bcrypt-hash")


def test_missing_hash_raises():
    with pytest.raises(HashingError):
        PasswordHash().matches("pa55word1234")
