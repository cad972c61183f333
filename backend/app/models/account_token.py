"""Single-use account token model (email confirmation, password reset)."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base

if TYPE_CHECKING:
    from app.models.user import User


class TokenPurpose(str, Enum):
    """What an account token may be used for."""

    EMAIL_CONFIRM = "email_confirm"
    PASSWORD_RESET = "password_reset"


class AccountToken(Base):
    """Token mailed to a user and consumed exactly once."""

    __tablename__ = "account_tokens"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True)  # SHA-256 hex
    purpose: Mapped[TokenPurpose] = mapped_column(
        SAEnum(
            TokenPurpose,
            name="account_token_purpose",
            values_callable=lambda purposes: [p.value for p in purposes],
        )
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    consumed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    user: Mapped["User"] = relationship(back_populates="account_tokens")

    def __repr__(self) -> str:
        return (
            f"<AccountToken(id={self.id}, user_id={self.user_id}, "
            f"purpose={self.purpose.value})>"
        )
