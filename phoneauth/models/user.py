from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String

from phoneauth.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    phone_number = Column(String(20), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    is_phone_verified = Column(Boolean, default=False, nullable=False)
    total_investment = Column(Float, default=0.0, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    def to_public_dict(self) -> dict:
        """Fields safe to return to the account owner"""
        return {
            "id": self.id,
            "username": self.username,
            "phoneNumber": self.phone_number,
            "isPhoneVerified": self.is_phone_verified,
            "totalInvestment": self.total_investment or 0.0
        }

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
