"""
==============================================================================
Security Module - Authentication & Cryptography
==============================================================================

JWT tokens and password hashing for back-office accounts.

- SecurityManager: password hashing (bcrypt) and JWT handling
- get_security_manager: cached instance shared by the app

Token Structure:
---------------
{
    "sub": "user-uuid",           # Subject (account ID)
    "email": "admin@example.com", # Login email for convenience
    "type": "access|refresh",     # Token type
    "exp": 1234567890,            # Expiration timestamp
    "iat": 1234567890             # Issued at timestamp
}

A refresh token is rejected where an access token is expected and vice
versa.

==============================================================================
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from storefront.config import Settings, get_settings


# Module logger
logger = logging.getLogger(__name__)


class SecurityManager:
    """
    Centralized security manager for authentication operations.

    Attributes:
        _pwd_context: Passlib context for password hashing
        _settings: Application settings reference

    Example:
        >>> security = SecurityManager()
        >>> hashed = security.hash_password("secret123")
        >>> security.verify_password("secret123", hashed)
        True
        >>> token = security.create_access_token({"sub": "user-id"})
        >>> security.verify_token(token, "access")["sub"]
        'user-id'
    """

    TOKEN_TYPE_ACCESS = "access"
    TOKEN_TYPE_REFRESH = "refresh"

    BCRYPT_SCHEMES = ["bcrypt"]
    BCRYPT_DEPRECATED = "auto"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._pwd_context = CryptContext(
            schemes=self.BCRYPT_SCHEMES,
            deprecated=self.BCRYPT_DEPRECATED
        )
        self._settings = settings or get_settings()

        logger.debug("SecurityManager initialized")

    # =========================================================================
    # PASSWORD HASHING METHODS
    # =========================================================================

    def hash_password(self, plain_password: str) -> str:
        """
        Hash a plain text password using bcrypt.

        Raises:
            ValueError: if the password is empty
        """
        if not plain_password:
            raise ValueError("Password cannot be empty")

        return self._pwd_context.hash(plain_password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a plain text password against a bcrypt hash.

        A malformed hash counts as a mismatch.
        """
        try:
            return self._pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            logger.warning(f"Password verification error: {type(e).__name__}")
            return False

    # =========================================================================
    # JWT TOKEN CREATION METHODS
    # =========================================================================

    def create_access_token(
        self,
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """Create a short-lived access token (data must include 'sub')."""
        return self._create_token(
            data=data,
            token_type=self.TOKEN_TYPE_ACCESS,
            expires_delta=expires_delta or timedelta(
                minutes=self._settings.access_token_expire_minutes
            )
        )

    def create_refresh_token(
        self,
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """Create a long-lived refresh token (data must include 'sub')."""
        return self._create_token(
            data=data,
            token_type=self.TOKEN_TYPE_REFRESH,
            expires_delta=expires_delta or timedelta(
                days=self._settings.refresh_token_expire_days
            )
        )

    def _create_token(
        self,
        data: Dict[str, Any],
        token_type: str,
        expires_delta: timedelta
    ) -> str:
        payload = data.copy()

        now = datetime.now(timezone.utc)
        expire = now + expires_delta

        payload.update({
            "type": token_type,
            "exp": expire,
            "iat": now
        })

        encoded_token = jwt.encode(
            payload,
            self._settings.jwt_secret_key,
            algorithm=self._settings.jwt_algorithm
        )

        logger.debug(f"Created {token_type} token, expires: {expire.isoformat()}")
        return encoded_token

    # =========================================================================
    # JWT TOKEN VERIFICATION METHODS
    # =========================================================================

    def verify_token(
        self,
        token: str,
        token_type: str = TOKEN_TYPE_ACCESS
    ) -> Optional[Dict[str, Any]]:
        """
        Verify signature, expiry and type of a JWT.

        Returns:
            Decoded payload if valid, None otherwise
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.jwt_secret_key,
                algorithms=[self._settings.jwt_algorithm]
            )
        except JWTError as e:
            logger.debug(f"Token verification failed: {e}")
            return None

        if payload.get("type") != token_type:
            logger.warning(
                f"Token type mismatch: expected {token_type}, "
                f"got {payload.get('type')}"
            )
            return None

        return payload

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def get_access_token_expire_seconds(self) -> int:
        return self._settings.access_token_expire_minutes * 60


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_security_manager() -> SecurityManager:
    """Get the global SecurityManager instance."""
    return SecurityManager()
