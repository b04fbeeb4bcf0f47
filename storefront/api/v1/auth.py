"""
==============================================================================
Authentication Endpoints
==============================================================================

Back-office sign-in, token refresh and the current session.

==============================================================================
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.db.database import get_db
from storefront.db.models import User
from storefront.core.dependencies import get_current_user
from storefront.services.auth_service import AuthService
from storefront.schemas.auth import (
    LoginRequest,
    TokenResponse,
    RefreshRequest,
    UserInfo,
    CurrentUserResponse,
    CurrentUserInfo,
)


router = APIRouter(prefix="/auth", tags=["Authentication"])


class AuthController:
    """Controller for authentication operations."""

    def __init__(self, db: Session):
        self._service = AuthService(db)

    def _token_response(self, user: User, access_token: str, refresh_token: str) -> TokenResponse:
        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._service.get_token_expiry_seconds(),
            user=UserInfo(id=user.id, email=user.email)
        )

    def login(self, request: LoginRequest) -> TokenResponse:
        """Authenticate and generate tokens."""
        return self._token_response(
            *self._service.authenticate(request.email, request.password)
        )

    def refresh(self, request: RefreshRequest) -> TokenResponse:
        """Refresh tokens."""
        return self._token_response(
            *self._service.refresh_tokens(request.refresh_token)
        )


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Sign in with email and password."""
    controller = AuthController(db)
    return controller.login(request)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(request: RefreshRequest, db: Session = Depends(get_db)):
    """Refresh access token using refresh token."""
    controller = AuthController(db)
    return controller.refresh(request)


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(user: User = Depends(get_current_user)):
    """Get the signed-in account."""
    return CurrentUserResponse(user=CurrentUserInfo.model_validate(user))
