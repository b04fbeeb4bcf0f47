"""
==============================================================================
Authentication Service Module
==============================================================================

Back-office sign-in and token refresh.

Authentication Flow:
-------------------
    ┌─────────────┐
    │   Login     │
    │  Request    │
    └──────┬──────┘
           │
    ┌──────▼──────┐     ┌─────────────┐
    │ Find Account│────▶│  Not Found  │ → INVALID_CREDENTIALS
    └──────┬──────┘     └─────────────┘
           │
    ┌──────▼──────┐     ┌─────────────┐
    │  Verify     │────▶│  Password   │ → INVALID_CREDENTIALS
    │  Password   │     │   Wrong     │
    └──────┬──────┘     └─────────────┘
           │
    ┌──────▼──────┐     ┌─────────────┐
    │   Check     │────▶│  Account    │ → ACCOUNT_DISABLED
    │   Active    │     │  Disabled   │
    └──────┬──────┘     └─────────────┘
           │
    ┌──────▼──────┐
    │  Generate   │
    │   Tokens    │
    └─────────────┘

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from storefront.core import exceptions
from storefront.core.security import SecurityManager, get_security_manager
from storefront.db.models import User


# Module logger
logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for back-office accounts.

    Attributes:
        _db: Database session for account queries
        _security: SecurityManager for crypto operations

    Example:
        >>> auth_service = AuthService(db_session)
        >>> user, access, refresh = auth_service.authenticate("admin@example.com", "pass")
        >>> user, access, refresh = auth_service.refresh_tokens(refresh)
    """

    def __init__(
        self,
        db: Session,
        security: Optional[SecurityManager] = None
    ) -> None:
        self._db = db
        self._security = security or get_security_manager()

    # =========================================================================
    # AUTHENTICATION METHODS
    # =========================================================================

    def authenticate(self, email: str, password: str) -> Tuple[User, str, str]:
        """
        Sign in with email and password.

        Returns:
            Tuple of (User, access_token, refresh_token)

        Raises:
            AppException: INVALID_CREDENTIALS if the account is unknown or
                the password is wrong
            AppException: ACCOUNT_DISABLED if the account is inactive
        """
        normalized_email = email.lower().strip()

        user = self._db.query(User).filter(User.email == normalized_email).first()

        if not user:
            logger.warning(f"Login failed: account not found - {normalized_email}")
            raise exceptions.invalid_credentials()

        if not self._security.verify_password(password, user.password_hash):
            logger.warning(f"Login failed: invalid password - {normalized_email}")
            raise exceptions.invalid_credentials()

        if not user.is_active:
            logger.warning(f"Login failed: account disabled - {normalized_email}")
            raise exceptions.account_disabled()

        access_token, refresh_token = self._generate_tokens(user)

        logger.info(f"✅ Signed in: {user.email}")
        return user, access_token, refresh_token

    def refresh_tokens(self, refresh_token: str) -> Tuple[User, str, str]:
        """
        Issue a new token pair from a valid refresh token.

        Raises:
            AppException: TOKEN_EXPIRED, TOKEN_INVALID or ACCOUNT_DISABLED
        """
        payload = self._security.verify_token(
            refresh_token, SecurityManager.TOKEN_TYPE_REFRESH
        )

        if not payload:
            logger.warning("Token refresh failed: invalid or expired token")
            raise exceptions.token_expired()

        user_id = payload.get("sub")
        if not user_id:
            logger.warning("Token refresh failed: missing 'sub' claim")
            raise exceptions.token_invalid()

        user = self._db.query(User).filter(User.id == user_id).first()

        if not user:
            logger.warning(f"Token refresh failed: account not found - {user_id}")
            raise exceptions.token_invalid()

        if not user.is_active:
            logger.warning(f"Token refresh failed: account disabled - {user.email}")
            raise exceptions.account_disabled()

        access_token, new_refresh_token = self._generate_tokens(user)

        logger.info(f"✅ Tokens refreshed for: {user.email}")
        return user, access_token, new_refresh_token

    # =========================================================================
    # TOKEN GENERATION
    # =========================================================================

    def _generate_tokens(self, user: User) -> Tuple[str, str]:
        token_data = {"sub": user.id, "email": user.email}

        access_token = self._security.create_access_token(token_data)
        refresh_token = self._security.create_refresh_token(token_data)

        return access_token, refresh_token

    def get_token_expiry_seconds(self) -> int:
        return self._security.get_access_token_expire_seconds()
