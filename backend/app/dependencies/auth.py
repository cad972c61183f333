"""Authentication dependencies for protected routes."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import ForbiddenError, UnauthenticatedError
from app.models.user import User
from app.services.repositories import UserRepository
from app.services.session_signer import SessionSigner

# auto_error=False so a missing credential can be told apart from a bad one
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Get current authenticated user from the session token.

    No bearer credential -> 401. A credential that fails verification, or
    whose user no longer exists or is no longer verified and active -> 403.
    The user row is always re-read, so claims signed before a deactivation
    stop working immediately.

    Usage:
        @router.get("/protected")
        def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()

    claims = SessionSigner.verify_session_token(credentials.credentials)

    user = UserRepository(db).find_by_id(claims.user_id)
    if user is None:
        raise ForbiddenError("User not found")

    if not user.active or not user.verified:
        raise ForbiddenError("User account is disabled")

    return user
