"""FastAPI dependencies for authentication."""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from legal_dashboard.shared.config import get_settings
from .jwt_validator import get_validator
from .models import User, ADMIN_GROUP

logger = logging.getLogger(__name__)

# HTTP Bearer token security scheme with auto_error=False to handle missing tokens manually
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Extracts Bearer token from Authorization header and validates it
    against the Cognito user pool.

    When ENABLE_AUTHENTICATION=false, bypasses authentication and returns
    an anonymous admin user. This should only be used in development/testing.

    Args:
        credentials: HTTP Bearer token credentials (None if missing)

    Returns:
        User object with authenticated user information

    Raises:
        HTTPException: 401 if token is missing or invalid (when auth enabled)
    """
    if not get_settings().enable_authentication:
        logger.warning("⚠️ Authentication is DISABLED via ENABLE_AUTHENTICATION=false - returning anonymous user")
        return User(
            user_id="anonymous",
            email="anonymous@local.dev",
            name="Anonymous User",
            groups=[ADMIN_GROUP],
        )

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    validator = get_validator()
    if validator is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication service misconfigured."
        )

    try:
        return validator.validate_token(credentials.credentials)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in authentication: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Require membership of the Cognito ``admin`` group.

    Raises:
        HTTPException: 403 if the user is not an admin
    """
    if not user.is_admin:
        logger.warning(f"User {user.email} (groups: {user.groups}) denied admin access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
