"""
SelfCare Planner Authentication Module
JWT-based authentication for the API
"""

from .dependencies import get_current_user, load_active_user
from .models import AuthResponse, TokenData, UserCreate, UserLogin
from .utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)

__all__ = [
    # Dependencies
    "get_current_user",
    "load_active_user",
    # Models
    "TokenData",
    "UserCreate",
    "UserLogin",
    "AuthResponse",
    # Utils
    "create_access_token",
    "decode_access_token",
    "get_password_hash",
    "verify_password",
]
