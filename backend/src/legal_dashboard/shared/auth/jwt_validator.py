"""Cognito JWT validation against the user pool's JWKS."""

import json
import logging
import time
from typing import Any, Dict, Optional

import httpx
import jwt
from fastapi import HTTPException, status
from jwt.algorithms import RSAAlgorithm

from legal_dashboard.shared.config import get_settings
from .models import User

logger = logging.getLogger(__name__)

JWKS_CACHE_TTL_SECONDS = 3600


class CognitoJWTValidator:
    """
    Validates Cognito-issued RS256 tokens.

    Signing keys are fetched from ``{issuer}/.well-known/jwks.json`` and
    cached for an hour. Only the signature and issuer are verified; the
    audience claim differs between ID and access tokens and is not checked.
    """

    def __init__(self, user_pool_id: str, region: str, http_client: Optional[httpx.Client] = None):
        self.user_pool_id = user_pool_id
        self.region = region
        self.issuer = f"https://cognito-idp.{region}.amazonaws.com/{user_pool_id}"
        self.jwks_url = f"{self.issuer}/.well-known/jwks.json"
        self._http_client = http_client
        self._keys: Dict[str, Any] = {}
        self._fetched_at = 0.0

    def _fetch_jwks(self) -> Dict[str, Any]:
        if self._http_client is not None:
            response = self._http_client.get(self.jwks_url, timeout=5.0)
        else:
            response = httpx.get(self.jwks_url, timeout=5.0)
        response.raise_for_status()
        return response.json()

    def get_signing_keys(self, force_refresh: bool = False) -> Dict[str, Any]:
        """Return kid -> public key, refreshing the cache when stale."""
        now = time.time()
        if self._keys and not force_refresh and (now - self._fetched_at) < JWKS_CACHE_TTL_SECONDS:
            return self._keys

        logger.info(f"Fetching JWKS from {self.jwks_url}")
        data = self._fetch_jwks()
        keys = {}
        for key_data in data.get("keys", []):
            keys[key_data["kid"]] = RSAAlgorithm.from_jwk(json.dumps(key_data))

        self._keys = keys
        self._fetched_at = now
        return self._keys

    def decode(self, token: str) -> Dict[str, Any]:
        """Verify the token and return its claims. Raises ValueError or jwt errors."""
        header = jwt.get_unverified_header(token)
        kid = header.get("kid")
        if not kid:
            raise ValueError("Token header is missing 'kid'")

        public_key = self.get_signing_keys().get(kid)
        if public_key is None:
            raise ValueError(f"Signing key not found for kid {kid}")

        return jwt.decode(
            token,
            public_key,
            algorithms=["RS256"],
            issuer=self.issuer,
            options={"verify_aud": False},
        )

    def validate_token(self, token: str) -> User:
        """
        Validate a bearer token and build the authenticated user.

        Raises:
            HTTPException: 401 if the token is malformed, unsigned by the pool,
                expired, or issued by a different pool
        """
        try:
            claims = self.decode(token)
        except (jwt.PyJWTError, ValueError, KeyError, httpx.HTTPError) as e:
            logger.warning(f"Token validation failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if "sub" not in claims:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return User.from_claims(claims)


_validator: Optional[CognitoJWTValidator] = None


def get_validator() -> Optional[CognitoJWTValidator]:
    """Get the global validator, or None when no user pool is configured."""
    global _validator
    if _validator is None:
        settings = get_settings()
        if not settings.cognito_user_pool_id:
            logger.error("COGNITO_USER_POOL_ID is not set - tokens cannot be validated")
            return None
        _validator = CognitoJWTValidator(
            user_pool_id=settings.cognito_user_pool_id,
            region=settings.user_pool_region,
        )
    return _validator
