"""
OTP Manager Tests

Issue/verify lifecycle, lazy expiry, mismatch handling and verification markers.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from phoneauth.auth.otp_manager import OTPManager
from phoneauth.auth.otp_store import MemoryOTPStore
from phoneauth.core.exceptions import OTPExpiredOrInvalidError, OTPMismatchError

PHONE = "+15551234567"


class FakeClock:
    def __init__(self):
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(clock):
    return OTPManager(MemoryOTPStore(), otp_validity_minutes=10, clock=clock)


class TestIssue:

    def test_code_is_six_ascii_digits(self, manager):
        code = manager.issue(PHONE)

        assert len(code) == 6
        assert code.isdigit()
        assert code.isascii()
        assert 100000 <= int(code) <= 999999

    def test_code_range_bounds(self):
        with patch("phoneauth.auth.otp_manager.secrets.randbelow", return_value=0):
            assert OTPManager.generate_code() == "100000"
        with patch("phoneauth.auth.otp_manager.secrets.randbelow", return_value=899999):
            assert OTPManager.generate_code() == "999999"

    def test_plain_code_is_not_stored(self, manager):
        code = manager.issue(PHONE)
        stored = manager.store.get(f"otp:{PHONE}")

        assert stored is not None
        assert code not in stored.values()
        assert stored["otp_hash"] != code

    def test_reissue_invalidates_previous_code(self, manager):
        with patch.object(OTPManager, "generate_code", side_effect=["111111", "222222"]):
            first = manager.issue(PHONE)
            second = manager.issue(PHONE)

        with pytest.raises(OTPMismatchError):
            manager.verify(PHONE, first)
        manager.verify(PHONE, second)


class TestVerify:

    def test_correct_code_verifies_exactly_once(self, manager):
        code = manager.issue(PHONE)

        manager.verify(PHONE, code)

        with pytest.raises(OTPExpiredOrInvalidError) as exc_info:
            manager.verify(PHONE, code)
        assert not isinstance(exc_info.value, OTPMismatchError)
        assert exc_info.value.message == "OTP expired or invalid"

    def test_verify_without_issue_fails(self, manager):
        with pytest.raises(OTPExpiredOrInvalidError):
            manager.verify(PHONE, "123456")

    def test_expired_code_fails_even_when_digits_match(self, manager, clock):
        code = manager.issue(PHONE)
        clock.advance(minutes=10, seconds=1)

        with pytest.raises(OTPExpiredOrInvalidError) as exc_info:
            manager.verify(PHONE, code)
        assert exc_info.value.message == "OTP expired or invalid"

    def test_code_valid_just_before_expiry(self, manager, clock):
        code = manager.issue(PHONE)
        clock.advance(minutes=9, seconds=59)

        manager.verify(PHONE, code)

    def test_mismatch_keeps_pending_code(self, manager):
        code = manager.issue(PHONE)
        wrong = "000000" if code != "000000" else "111111"

        with pytest.raises(OTPMismatchError) as exc_info:
            manager.verify(PHONE, wrong)
        assert exc_info.value.message == "Invalid OTP"

        manager.verify(PHONE, code)

    def test_codes_are_per_phone_number(self, manager):
        code = manager.issue(PHONE)
        manager.issue("+15559876543")

        with pytest.raises(OTPExpiredOrInvalidError):
            manager.verify("+15550000000", code)
        manager.verify(PHONE, code)

    def test_discard_removes_pending_code(self, manager):
        code = manager.issue(PHONE)
        manager.discard(PHONE)

        with pytest.raises(OTPExpiredOrInvalidError):
            manager.verify(PHONE, code)


class TestVerificationMarker:

    def test_not_verified_before_success(self, manager):
        manager.issue(PHONE)
        assert manager.is_verified(PHONE) is False

    def test_success_marks_phone_verified(self, manager):
        manager.verify(PHONE, manager.issue(PHONE))
        assert manager.is_verified(PHONE) is True

    def test_consume_verification(self, manager):
        manager.verify(PHONE, manager.issue(PHONE))
        manager.consume_verification(PHONE)
        assert manager.is_verified(PHONE) is False
