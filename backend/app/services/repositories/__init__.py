"""Repository layer - data access abstraction.

Repositories handle all database queries, providing a clean interface
for services. Services should use repositories for data access rather
than directly querying SQLAlchemy models.

Dependency direction: Services -> Repositories -> Models
"""

from .account_token_repository import AccountTokenRepository
from .post_repository import PostRepository
from .user_repository import UserRepository

__all__ = [
    "AccountTokenRepository",
    "PostRepository",
    "UserRepository",
]
