"""
Auth Router
Phone verification, registration and login endpoints
"""

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
import logging

from phoneauth.auth.jwt_manager import JWTManager
from phoneauth.auth.otp_manager import OTPManager
from phoneauth.auth.sms_service import SMSService
from phoneauth.core.config import settings
from phoneauth.core.exceptions import AuthError, ConflictError, DeliveryError, ValidationError
from phoneauth.dependencies import (
    get_current_user,
    get_jwt_manager,
    get_otp_manager,
    get_sms_service,
    get_user_service
)
from phoneauth.models.user import User
from phoneauth.schemas.auth_schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    SendOTPRequest,
    UserProfile,
    UserSummary,
    VerifyOTPRequest
)
from phoneauth.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def _summary(user: User) -> UserSummary:
    return UserSummary(
        username=user.username,
        phone_number=user.phone_number,
        total_investment=user.total_investment or 0.0
    )


@router.post("/send-otp", response_model=MessageResponse)
async def send_otp(
    request: SendOTPRequest,
    otp_manager: OTPManager = Depends(get_otp_manager),
    sms_service: SMSService = Depends(get_sms_service)
):
    """
    Generate an OTP for a phone number and send it by SMS.

    A new request replaces any code already pending for the number.
    """
    if not request.phone_number:
        raise ValidationError("Phone number is required")

    # store calls may block on Redis
    otp_code = await run_in_threadpool(otp_manager.issue, request.phone_number)

    try:
        await sms_service.send_otp(request.phone_number, otp_code)
    except DeliveryError:
        # the pending code stays valid unless configured otherwise
        if settings.DISCARD_OTP_ON_DELIVERY_FAILURE:
            await run_in_threadpool(otp_manager.discard, request.phone_number)
        raise

    return MessageResponse(message="OTP sent successfully")


@router.post("/verify-otp", response_model=MessageResponse)
def verify_otp(
    request: VerifyOTPRequest,
    otp_manager: OTPManager = Depends(get_otp_manager)
):
    """Verify a pending OTP. A wrong code does not invalidate the pending one."""
    if not request.phone_number or not request.otp:
        raise ValidationError("Phone number and OTP are required")

    otp_manager.verify(request.phone_number, request.otp)
    return MessageResponse(message="OTP verified successfully")


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    users: UserService = Depends(get_user_service),
    otp_manager: OTPManager = Depends(get_otp_manager),
    tokens: JWTManager = Depends(get_jwt_manager)
):
    """
    Create a user and return a session token.

    With REQUIRE_PHONE_VERIFICATION the phone number must have passed
    verify-otp recently; otherwise it is recorded as verified regardless.
    """
    if not request.username or not request.phone_number or not request.password:
        raise ValidationError("All fields are required")

    verified = otp_manager.is_verified(request.phone_number)
    if settings.REQUIRE_PHONE_VERIFICATION and not verified:
        raise ValidationError("Phone number not verified")

    # early, friendlier rejection; the unique index still decides races
    if users.find_by_username_or_phone(request.username, request.phone_number):
        raise ConflictError()

    user = users.insert(
        username=request.username,
        phone_number=request.phone_number,
        password=request.password,
        phone_verified=verified or not settings.REQUIRE_PHONE_VERIFICATION
    )
    if verified:
        otp_manager.consume_verification(request.phone_number)

    logger.info(f"User registered: {user.username}")
    return RegisterResponse(
        message="User registered successfully",
        token=tokens.generate_access_token(user.id, user.username),
        user=_summary(user)
    )


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    users: UserService = Depends(get_user_service),
    tokens: JWTManager = Depends(get_jwt_manager)
):
    """Exchange phone number and password for a session token"""
    if not request.phone_number or not request.password:
        raise ValidationError("Phone number and password are required")

    user = users.find_by_phone(request.phone_number)
    if user is None:
        raise AuthError("User not found")

    if not users.verify_password(user, request.password):
        logger.warning(f"Failed login for user {user.id}")
        raise AuthError("Invalid password")

    logger.info(f"User {user.id} logged in")
    return LoginResponse(
        token=tokens.generate_access_token(user.id, user.username),
        user=_summary(user)
    )


@router.get("/me", response_model=ProfileResponse)
def me(user: User = Depends(get_current_user)):
    """Profile of the user owning the bearer token"""
    return ProfileResponse(
        user=UserProfile(
            id=user.id,
            username=user.username,
            phone_number=user.phone_number,
            total_investment=user.total_investment or 0.0,
            is_phone_verified=user.is_phone_verified
        )
    )
