"""
Authentication module
Handles OTP issuance, SMS delivery and session tokens
"""

from .otp_store import OTPStore, MemoryOTPStore, RedisOTPStore, build_otp_store
from .otp_manager import OTPManager
from .sms_service import SMSService
from .jwt_manager import JWTManager

__all__ = [
    'OTPStore',
    'MemoryOTPStore',
    'RedisOTPStore',
    'build_otp_store',
    'OTPManager',
    'SMSService',
    'JWTManager'
]
