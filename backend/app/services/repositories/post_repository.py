"""Post and like data access layer."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import Session, aliased

from app.exceptions import NotFoundError
from app.models import Like, Post, User

if TYPE_CHECKING:
    from sqlalchemy import Row

logger = logging.getLogger(__name__)


class PostRepository:
    """Centralized post data access.

    Naming conventions:
    - find_* : Query that may return None or empty list
    - get_* : Query that raises NotFoundError if missing
    - create_* / delete_* : Insert or remove records
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, post_id: str) -> Post | None:
        """Find post by primary key."""
        return self._db.query(Post).filter(Post.id == post_id).first()

    def get_by_id(self, post_id: str) -> Post:
        """Get post by primary key, raising NotFoundError if missing."""
        post = self.find_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        return post

    def create(self, *, author_id: str, image_ref: str, caption: str | None) -> Post:
        """Insert a post."""
        post = Post(author_id=author_id, image_ref=image_ref, caption=caption)
        self._db.add(post)
        self._db.flush()
        logger.debug(f"Created post {post.id} for author {author_id}")
        return post

    def delete(self, post: Post) -> None:
        """Delete a post together with its likes and comments."""
        self._db.delete(post)
        self._db.flush()

    def find_like(self, post_id: str, user_id: str) -> Like | None:
        """Find the like a user left on a post."""
        return (
            self._db.query(Like)
            .filter(Like.post_id == post_id, Like.user_id == user_id)
            .first()
        )

    def create_like(self, post_id: str, user_id: str) -> Like:
        """Insert a like. Raises IntegrityError if the pair already exists."""
        like = Like(post_id=post_id, user_id=user_id)
        self._db.add(like)
        self._db.flush()
        return like

    def delete_like(self, like: Like) -> None:
        """Remove a like."""
        self._db.delete(like)
        self._db.flush()

    def find_feed_rows(self, post_id: str | None = None) -> "list[Row]":
        """Fetch one row per (post, like), NULL-padded for posts without likes.

        Rows are ordered newest post first, then by like creation so likers
        keep a stable order within a post.
        """
        author = aliased(User, name="author")
        liker = aliased(User, name="liker")

        stmt = (
            select(
                Post.id.label("post_id"),
                Post.image_ref,
                Post.caption,
                Post.created_at,
                author.name.label("author_name"),
                Like.id.label("like_id"),
                Like.user_id.label("liker_id"),
                liker.name.label("liker_name"),
            )
            .outerjoin(author, Post.author_id == author.id)
            .outerjoin(Like, Like.post_id == Post.id)
            .outerjoin(liker, Like.user_id == liker.id)
            .order_by(Post.created_at.desc(), Post.id, Like.created_at, Like.id)
        )
        if post_id is not None:
            stmt = stmt.where(Post.id == post_id)

        return list(self._db.execute(stmt).all())
