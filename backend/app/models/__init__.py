"""SQLAlchemy ORM models."""

from app.models.account_token import AccountToken, TokenPurpose
from app.models.comment import Comment
from app.models.like import Like
from app.models.outbox_email import OutboxEmail, OutboxStatus
from app.models.post import Post
from app.models.user import User

__all__ = [
    "AccountToken",
    "Comment",
    "Like",
    "OutboxEmail",
    "OutboxStatus",
    "Post",
    "TokenPurpose",
    "User",
]
