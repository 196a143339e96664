from typing import List, Literal, Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Phone Auth API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Phone number verification, registration and login"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS
    ALLOWED_HOSTS: List[str] = ["*"]

    # Database
    DATABASE_URL: str = "sqlite:///./phoneauth.db"

    # OTP store (memory store is used when unset)
    REDIS_URL: Optional[str] = None

    # Security
    JWT_SECRET: str = "phoneauth-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # OTP
    OTP_EXPIRE_MINUTES: int = 10
    VERIFIED_PHONE_TTL_MINUTES: int = 30
    REQUIRE_PHONE_VERIFICATION: bool = False
    DISCARD_OTP_ON_DELIVERY_FAILURE: bool = False

    # SMS gateway
    SMS_PROVIDER: Literal["msg91", "console"] = "msg91"
    MSG91_AUTH_KEY: Optional[str] = None
    MSG91_TEMPLATE_ID: Optional[str] = None
    MSG91_API_URL: str = "https://control.msg91.com/api/v5/otp"
    SMS_TIMEOUT_SECONDS: float = 10.0

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}

# Create settings instance
settings = Settings()
