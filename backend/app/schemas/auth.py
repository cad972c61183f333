"""Schemas for authentication endpoints."""

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator


def _confirm_password(v: str, info: ValidationInfo) -> str:
    """Shared check that the confirmation matches the password."""
    password = info.data.get("password")
    if password is not None and v != password:
        raise ValueError("Passwords do not match")
    return v


class UserRegister(BaseModel):
    """Schema for user registration."""

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)
    password_confirmation: str

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        return _confirm_password(v, info)


class UserLogin(BaseModel):
    """Schema for user login."""

    email: str  # Any string: malformed emails get the same answer as unknown ones
    password: str


class UserInfo(BaseModel):
    """Schema for user info in auth responses."""

    id: str
    name: str
    email: str

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """Schema for login response."""

    access_token: str
    token_type: str = "bearer"
    user: UserInfo


class MessageResponse(BaseModel):
    """Schema for simple message response."""

    message: str


class ResendVerificationRequest(BaseModel):
    """Schema for resending verification email."""

    email: EmailStr


class ForgotPasswordRequest(BaseModel):
    """Schema for requesting password reset."""

    email: str


class ResetPasswordRequest(BaseModel):
    """Schema for resetting password with a token from the reset link."""

    password: str = Field(min_length=6, max_length=100)
    password_confirmation: str

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        return _confirm_password(v, info)
