"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import get_current_user
from app.models.user import User
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
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(data: UserRegister, db: Session = Depends(get_db)) -> dict:
    """Register a new user and send verification email."""
    return {"message": AuthService(db).register(data)}


@router.post("/login", response_model=TokenResponse)
def login(data: UserLogin, db: Session = Depends(get_db)) -> dict:
    """Login and get a session token."""
    result = AuthService(db).login(data.email, data.password)
    return {
        "access_token": result.access_token,
        "token_type": "bearer",
        "user": UserInfo.model_validate(result.user),
    }


@router.get("/verify-email/{token}", response_model=MessageResponse)
def verify_email(token: str, db: Session = Depends(get_db)) -> dict:
    """Verify email with token from email link."""
    return {"message": AuthService(db).verify_email(token)}


@router.post("/resend-verification", response_model=MessageResponse)
def resend_verification(data: ResendVerificationRequest, db: Session = Depends(get_db)) -> dict:
    """Resend verification email."""
    return {"message": AuthService(db).resend_verification(data.email)}


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(data: ForgotPasswordRequest, db: Session = Depends(get_db)) -> dict:
    """Request password reset email."""
    return {"message": AuthService(db).forgot_password(data.email)}


@router.post("/reset-password/{token}", response_model=MessageResponse)
def reset_password(
    token: str, data: ResetPasswordRequest, db: Session = Depends(get_db)
) -> dict:
    """Reset password with token from email."""
    return {"message": AuthService(db).reset_password(token, data)}


@router.get("/me", response_model=UserInfo)
def get_me(current_user: User = Depends(get_current_user)) -> User:
    """Get the current authenticated user's information."""
    return current_user
