"""
JWT Token Manager for Authentication
Handles session token generation and validation
"""

import jwt
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

class JWTManager:
    """
    Issues HS256 session tokens.
    Tokens are stateless; expiry is enforced when they are verified.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", token_expiry_hours: int = 24):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.token_expiry_hours = token_expiry_hours

    @classmethod
    def from_settings(cls, settings) -> "JWTManager":
        return cls(
            secret_key=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            token_expiry_hours=settings.ACCESS_TOKEN_EXPIRE_HOURS
        )

    def generate_access_token(self, user_id: int, username: Optional[str] = None) -> str:
        """
        Generate access token for an authenticated user

        Args:
            user_id: Primary key of the user
            username: Included for client convenience

        Returns:
            JWT access token string
        """
        issued_at = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "user_id": user_id,
            "username": username,
            "iat": issued_at,
            "exp": issued_at + timedelta(hours=self.token_expiry_hours),
            "type": "access"
        }

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.info(f"Generated access token for user: {user_id}")
        return token

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify and decode JWT token

        Args:
            token: JWT token string

        Returns:
            Decoded token payload or None if invalid
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.warning("Token has expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {str(e)}")
            return None

    def extract_user_id(self, token: str) -> Optional[int]:
        """User id from a valid access token, else None"""
        payload = self.verify_token(token)
        if not payload or payload.get("type") != "access":
            return None

        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return None
