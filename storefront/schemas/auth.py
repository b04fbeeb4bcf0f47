"""
==============================================================================
Authentication Schemas Module
==============================================================================

Request and response schemas for back-office sign-in.

==============================================================================
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoginRequest(BaseModel):
    """Email and password credentials."""
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.lower().strip()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class UserInfo(BaseModel):
    """Basic account info for token response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str


class TokenResponse(BaseModel):
    """Token response after authentication."""
    success: bool = Field(default=True)
    access_token: str
    refresh_token: str
    token_type: str = Field(default="bearer")
    expires_in: int
    user: UserInfo


class RefreshRequest(BaseModel):
    """Token refresh request."""
    refresh_token: str


class CurrentUserInfo(BaseModel):
    """Signed-in account details."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CurrentUserResponse(BaseModel):
    """Current session response."""
    success: bool = Field(default=True)
    user: CurrentUserInfo
