"""
Shared collaborators and FastAPI dependency providers

The OTP manager, SMS service and token issuer are process-wide
instances. Routes receive them through Depends() so they can be
overridden with app.dependency_overrides.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from phoneauth.auth.jwt_manager import JWTManager
from phoneauth.auth.otp_manager import OTPManager
from phoneauth.auth.otp_store import build_otp_store
from phoneauth.auth.sms_service import SMSService
from phoneauth.core.config import settings
from phoneauth.core.database import get_db
from phoneauth.core.exceptions import TokenError
from phoneauth.models.user import User
from phoneauth.services.user_service import UserService

# Global instances
otp_manager = OTPManager(
    build_otp_store(settings),
    otp_validity_minutes=settings.OTP_EXPIRE_MINUTES,
    verified_ttl_minutes=settings.VERIFIED_PHONE_TTL_MINUTES
)
sms_service = SMSService.from_settings(settings)
jwt_manager = JWTManager.from_settings(settings)

bearer_scheme = HTTPBearer(auto_error=False)


def get_otp_manager() -> OTPManager:
    return otp_manager


def get_sms_service() -> SMSService:
    return sms_service


def get_jwt_manager() -> JWTManager:
    return jwt_manager


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: JWTManager = Depends(get_jwt_manager),
    users: UserService = Depends(get_user_service)
) -> User:
    """Resolve the bearer token to a user or raise TokenError"""
    if credentials is None:
        raise TokenError()

    user_id = tokens.extract_user_id(credentials.credentials)
    if user_id is None:
        raise TokenError()

    user = users.find_by_id(user_id)
    if user is None:
        raise TokenError()
    return user
