"""Shared authentication utilities for API projects."""

from .dependencies import get_current_user, require_admin, security
from .jwt_validator import CognitoJWTValidator, get_validator
from .models import User

__all__ = [
    "get_current_user",
    "require_admin",
    "security",
    "CognitoJWTValidator",
    "get_validator",
    "User",
]
