"""
User Service
Credential store operations over the users table
"""

from typing import Optional
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from phoneauth.core.exceptions import ConflictError
from phoneauth.core.security import get_password_hash, verify_password
from phoneauth.models.user import User

logger = logging.getLogger(__name__)


class UserService:
    """
    Repository for user records

    Uniqueness of username and phone number is enforced by the table's
    unique indexes; insert() maps a violation to ConflictError.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_username_or_phone(self, username: str, phone_number: str) -> Optional[User]:
        return self.db.query(User).filter(
            or_(User.username == username, User.phone_number == phone_number)
        ).first()

    def find_by_phone(self, phone_number: str) -> Optional[User]:
        return self.db.query(User).filter(User.phone_number == phone_number).first()

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def insert(self, username: str, phone_number: str, password: str,
               phone_verified: bool = False) -> User:
        """
        Hash the password and insert a new user in a single commit

        Args:
            username: Unique username
            phone_number: Unique phone number
            password: Plaintext password (never stored)
            phone_verified: Value for is_phone_verified

        Returns:
            The persisted User

        Raises:
            ConflictError: username or phone number already exists
        """
        user = User(
            username=username,
            phone_number=phone_number,
            password_hash=get_password_hash(password),
            is_phone_verified=phone_verified
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Duplicate registration rejected for username: {username}")
            raise ConflictError()

        self.db.refresh(user)
        logger.info(f"Created user {user.id} ({username})")
        return user

    def verify_password(self, user: User, password: str) -> bool:
        return verify_password(password, user.password_hash)
