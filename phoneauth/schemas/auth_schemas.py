"""
Request and response schemas for the auth endpoints

Request fields are optional at the schema level so handlers can return
the field-specific "required" messages themselves. JSON keys are camelCase.
"""

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SendOTPRequest(CamelModel):
    """Body for POST /send-otp"""
    phone_number: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": {"phoneNumber": "+15551234567"}}
    )


class VerifyOTPRequest(CamelModel):
    """Body for POST /verify-otp"""
    phone_number: Optional[str] = None
    otp: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": {"phoneNumber": "+15551234567", "otp": "123456"}}
    )

    @field_validator("otp", mode="before")
    @classmethod
    def numeric_otp_as_string(cls, v):
        """Clients sometimes send the code as a JSON number"""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class RegisterRequest(CamelModel):
    """Body for POST /register"""
    username: Optional[str] = None
    phone_number: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(CamelModel):
    """Body for POST /login"""
    phone_number: Optional[str] = None
    password: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class UserSummary(CamelModel):
    username: str
    phone_number: str
    total_investment: float = 0.0


class UserProfile(UserSummary):
    id: int
    is_phone_verified: bool


class RegisterResponse(BaseModel):
    message: str
    token: str
    user: UserSummary


class LoginResponse(BaseModel):
    token: str
    user: UserSummary


class ProfileResponse(BaseModel):
    user: UserProfile
