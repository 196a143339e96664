from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class PhoneAuthException(Exception):
    """Base exception for errors surfaced to API callers"""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(PhoneAuthException):
    """Missing or unacceptable request fields"""

    def __init__(self, message: str = "All fields are required"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class ConflictError(PhoneAuthException):
    """Duplicate username or phone number"""

    def __init__(self, message: str = "Username or phone number already registered"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class AuthError(PhoneAuthException):
    """Unknown user or wrong password"""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class OTPExpiredOrInvalidError(PhoneAuthException):
    """No pending OTP for the phone number, or it has expired"""

    def __init__(self, message: str = "OTP expired or invalid"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class OTPMismatchError(OTPExpiredOrInvalidError):
    """Supplied OTP does not match the pending one"""

    def __init__(self):
        super().__init__("Invalid OTP")


class DeliveryError(PhoneAuthException):
    """SMS gateway could not deliver the OTP"""

    def __init__(self, message: str = "Failed to send OTP", reason: str = "send_error"):
        self.reason = reason
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class TokenError(PhoneAuthException):
    """Missing, invalid or expired session token"""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


async def phoneauth_exception_handler(request: Request, exc: PhoneAuthException):
    """Render typed errors as {"message": ...}"""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, TokenError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors, same as missing fields"""
    logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request body"}
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Anything unexpected is logged server-side and hidden from the caller"""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error"}
    )


EXCEPTION_HANDLERS = {
    PhoneAuthException: phoneauth_exception_handler,
    RequestValidationError: validation_exception_handler,
    Exception: general_exception_handler,
}
