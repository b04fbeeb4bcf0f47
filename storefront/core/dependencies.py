"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for the back-office session.

The signed-in account is never held in process state; every request
resolves it from its bearer token.

Dependency Hierarchy:
--------------------
                    ┌─────────────────┐
                    │   get_db()      │
                    └────────┬────────┘
                             │
                    ┌────────▼────────┐
                    │get_current_user │
                    └────────┬────────┘
                             │
                    ┌────────▼────────┐
                    │  require_admin  │
                    └─────────────────┘

Every active back-office account is an admin; ``require_admin`` marks the
routes that need one.

Usage:
-----
    @router.post("/products")
    async def create(payload: ProductCreate, user: User = Depends(require_admin)):
        ...

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.core import exceptions
from storefront.core.security import SecurityManager, get_security_manager
from storefront.db.database import get_db
from storefront.db.models import User


# Module logger
logger = logging.getLogger(__name__)

# HTTP Bearer security scheme for Swagger UI
security_scheme = HTTPBearer(auto_error=False)


class AuthenticationManager:
    """
    Resolves the back-office account behind a bearer token.

    Example:
        >>> auth = AuthenticationManager(security_manager, db_session)
        >>> user = auth.authenticate_from_token(token)
    """

    def __init__(self, security: SecurityManager, db: Session) -> None:
        self._security = security
        self._db = db

    def extract_token_from_header(
        self,
        credentials: Optional[HTTPAuthorizationCredentials]
    ) -> str:
        """
        Raises:
            AppException: TOKEN_INVALID if no bearer credentials were sent
        """
        if not credentials:
            logger.debug("No authorization credentials provided")
            raise exceptions.token_invalid()

        return credentials.credentials

    def authenticate_from_token(
        self,
        token: str,
        token_type: str = SecurityManager.TOKEN_TYPE_ACCESS
    ) -> User:
        """
        Verify the token and load its active account.

        Raises:
            AppException: TOKEN_EXPIRED, TOKEN_INVALID or ACCOUNT_DISABLED
        """
        payload = self._security.verify_token(token, token_type)

        if not payload:
            raise exceptions.token_expired()

        user_id = payload.get("sub")
        if not user_id:
            logger.warning("Token payload missing 'sub' claim")
            raise exceptions.token_invalid()

        user = self._db.query(User).filter(User.id == user_id).first()

        if not user:
            logger.warning(f"Account not found for token: {user_id}")
            raise exceptions.token_invalid()

        if not user.is_active:
            logger.warning(f"Disabled account attempted access: {user.email}")
            raise exceptions.account_disabled()

        return user

    def get_current_user(
        self,
        credentials: Optional[HTTPAuthorizationCredentials]
    ) -> User:
        token = self.extract_token_from_header(credentials)
        return self.authenticate_from_token(token)


# =============================================================================
# FASTAPI DEPENDENCY FUNCTIONS
# =============================================================================

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    FastAPI dependency to get the current authenticated account.

    Raises:
        AppException: If authentication fails
    """
    auth_manager = AuthenticationManager(get_security_manager(), db)
    return auth_manager.get_current_user(credentials)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """FastAPI dependency for back-office (admin) routes."""
    return user
