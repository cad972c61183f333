"""Pydantic schemas for API request/response validation."""

from app.schemas.auth import (
    ForgotPasswordRequest,
    MessageResponse,
    ResendVerificationRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserInfo,
    UserLogin,
    UserRegister,
)
from app.schemas.common import ErrorDetail, ErrorResponse
from app.schemas.post import (
    FeedLike,
    FeedPost,
    PostMutationResponse,
    PostResponse,
    PostUpdate,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "FeedLike",
    "FeedPost",
    "ForgotPasswordRequest",
    "MessageResponse",
    "PostMutationResponse",
    "PostResponse",
    "PostUpdate",
    "ResendVerificationRequest",
    "ResetPasswordRequest",
    "TokenResponse",
    "UserInfo",
    "UserLogin",
    "UserRegister",
]
