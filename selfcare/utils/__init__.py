"""
SelfCare Planner Utilities
Configuration, logging and error types shared across the application
"""

from .config import Settings, get_settings
from .errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    SelfCareException,
    ServiceError,
    ValidationError,
)
from .logger import get_logger

__all__ = [
    # Config
    "get_settings",
    "Settings",
    # Logging
    "get_logger",
    # Errors
    "SelfCareException",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "AuthenticationError",
    "AuthorizationError",
    "ServiceError",
]
