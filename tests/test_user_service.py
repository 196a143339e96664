"""
User Service Tests
"""

import pytest

from phoneauth.core.exceptions import ConflictError
from phoneauth.services.user_service import UserService


@pytest.fixture
def users(db_session):
    return UserService(db_session)


def test_insert_hashes_password(users):
    user = users.insert("alice", "+15551234567", "s3cret-pass", phone_verified=True)

    assert user.id is not None
    assert user.password_hash != "s3cret-pass"
    assert user.password_hash.startswith("$2")
    assert user.is_phone_verified is True
    assert user.total_investment == 0.0
    assert user.created_at is not None


def test_verify_password(users):
    user = users.insert("alice", "+15551234567", "s3cret-pass")

    assert users.verify_password(user, "s3cret-pass") is True
    assert users.verify_password(user, "wrong") is False


def test_duplicate_username_raises_conflict(users):
    users.insert("alice", "+15551234567", "pw-one")

    with pytest.raises(ConflictError) as exc_info:
        users.insert("alice", "+15559999999", "pw-two")
    assert exc_info.value.message == "Username or phone number already registered"


def test_duplicate_phone_raises_conflict(users):
    users.insert("alice", "+15551234567", "pw-one")

    with pytest.raises(ConflictError):
        users.insert("bob", "+15551234567", "pw-two")


def test_session_usable_after_conflict(users):
    users.insert("alice", "+15551234567", "pw-one")
    with pytest.raises(ConflictError):
        users.insert("alice", "+15550000000", "pw-two")

    bob = users.insert("bob", "+15552222222", "pw-three")
    assert users.find_by_phone("+15552222222").id == bob.id


def test_find_by_username_or_phone(users):
    alice = users.insert("alice", "+15551234567", "pw")

    assert users.find_by_username_or_phone("alice", "+10000000000").id == alice.id
    assert users.find_by_username_or_phone("someone", "+15551234567").id == alice.id
    assert users.find_by_username_or_phone("someone", "+10000000000") is None


def test_find_by_phone_and_id(users):
    alice = users.insert("alice", "+15551234567", "pw")

    assert users.find_by_phone("+15551234567").username == "alice"
    assert users.find_by_phone("+19999999999") is None
    assert users.find_by_id(alice.id).username == "alice"
    assert users.find_by_id(9999) is None
