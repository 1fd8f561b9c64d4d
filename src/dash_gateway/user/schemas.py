"""Pydantic request/response schemas for the auth endpoints.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, EmailStr, Field

# Mirrors PASSWORD_MIN_LENGTH; AuthService re-checks against its config
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class ChangePasswordRequest(BaseModel):
    email: EmailStr
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(
        ..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )


class UserInfo(BaseModel):
    """Minimal user info returned on successful authentication."""

    user_id: str
    name: str
    email: str


class RegisterResponse(BaseModel):
    user_id: str
    name: str
    email: str
    created_at: str
