"""
OTP Manager
Issues and verifies one-time passcodes for phone number verification
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
import logging

from phoneauth.auth.otp_store import OTPStore
from phoneauth.core.exceptions import OTPExpiredOrInvalidError, OTPMismatchError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OTPManager:
    """
    Issues 6-digit OTPs keyed by phone number.

    At most one pending code exists per phone number; issuing again
    overwrites it. Codes are stored as salted SHA-256 hashes and expire
    lazily: the expiry is checked on verify, nothing sweeps the store.
    Verification is not rate limited.
    """

    def __init__(
        self,
        store: OTPStore,
        otp_validity_minutes: int = 10,
        verified_ttl_minutes: int = 30,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.otp_validity_minutes = otp_validity_minutes
        self.verified_ttl_minutes = verified_ttl_minutes
        self._now = clock or _utcnow

    @staticmethod
    def _otp_key(phone_number: str) -> str:
        return f"otp:{phone_number}"

    @staticmethod
    def _verified_key(phone_number: str) -> str:
        return f"verified:{phone_number}"

    @staticmethod
    def _hash_code(code: str, salt: str) -> str:
        return hashlib.sha256(f"{code}{salt}".encode()).hexdigest()

    @staticmethod
    def generate_code() -> str:
        """Uniform 6-digit code in [100000, 999999]"""
        return str(secrets.randbelow(900000) + 100000)

    def issue(self, phone_number: str) -> str:
        """
        Generate and store a new OTP for a phone number

        Args:
            phone_number: Phone number the code is bound to

        Returns:
            The plain code, for delivery only (never stored)
        """
        code = self.generate_code()
        salt = secrets.token_hex(16)
        expires_at = self._now() + timedelta(minutes=self.otp_validity_minutes)

        self.store.set(
            self._otp_key(phone_number),
            {
                "otp_hash": self._hash_code(code, salt),
                "salt": salt,
                "expires_at": expires_at.timestamp()
            },
            ttl_seconds=self.otp_validity_minutes * 60
        )

        logger.info(f"Issued OTP for {phone_number}, expires at {expires_at.isoformat()}")
        return code

    def verify(self, phone_number: str, code: str) -> None:
        """
        Verify a supplied OTP and consume it on success

        A wrong code leaves the pending entry in place.

        Raises:
            OTPExpiredOrInvalidError: no pending code, or it has expired
            OTPMismatchError: code does not match
        """
        key = self._otp_key(phone_number)
        stored = self.store.get(key)

        if not stored or self._now().timestamp() > stored["expires_at"]:
            logger.warning(f"OTP verification for {phone_number}: no live code")
            raise OTPExpiredOrInvalidError()

        supplied_hash = self._hash_code(code, stored["salt"])
        if not secrets.compare_digest(supplied_hash, stored["otp_hash"]):
            logger.warning(f"OTP verification for {phone_number}: code mismatch")
            raise OTPMismatchError()

        self.store.delete(key)
        self.store.set(
            self._verified_key(phone_number),
            {"verified_at": self._now().timestamp()},
            ttl_seconds=self.verified_ttl_minutes * 60
        )
        logger.info(f"OTP verified for {phone_number}")

    def discard(self, phone_number: str) -> None:
        """Drop any pending code for a phone number"""
        self.store.delete(self._otp_key(phone_number))

    def is_verified(self, phone_number: str) -> bool:
        """Whether the phone number passed verification recently"""
        return self.store.get(self._verified_key(phone_number)) is not None

    def consume_verification(self, phone_number: str) -> None:
        self.store.delete(self._verified_key(phone_number))
