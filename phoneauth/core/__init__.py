from .config import settings
from .security import get_password_hash, verify_password

__all__ = [
    "settings",
    "get_password_hash",
    "verify_password"
]
