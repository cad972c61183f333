"""Services layer - business logic and external integrations.

- auth_service / account_token_service / session_signer: account lifecycle
- post_service / feed_service / ownership_guard: content
- blob_store / email_service / outbox_service: external collaborators
- repositories/: Data access layer
- shared/: Shared utilities

Common imports for convenience:
    from app.services import PostRepository, UserRepository
"""

# Re-export commonly used components for convenience
from app.services.repositories import (
    AccountTokenRepository,
    PostRepository,
    UserRepository,
)

__all__ = [
    # Repositories
    "AccountTokenRepository",
    "PostRepository",
    "UserRepository",
]
