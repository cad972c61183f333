"""Feed read model: posts joined with authors and likers."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.services.blob_store import BlobStore
from app.services.repositories import PostRepository

logger = logging.getLogger(__name__)


@dataclass
class FeedLikeView:
    like_id: str
    user_id: str
    liker_name: str | None


@dataclass
class FeedPostView:
    id: str
    image_ref: str
    caption: str | None
    created_at: datetime
    author_name: str | None
    likes: list[FeedLikeView] = field(default_factory=list)
    image_url: str = ""


class FeedService:
    """Assemble denormalized feed posts."""

    def __init__(self, db: Session, blob_store: BlobStore) -> None:
        self._posts = PostRepository(db)
        self._blob_store = blob_store

    def list_feed(self) -> list[FeedPostView]:
        """All posts, newest first, each with its likers."""
        return self._resolve_images(self._fold(self._posts.find_feed_rows()))

    def get_feed(self, post_id: str) -> FeedPostView:
        """A single feed post. Raises NotFoundError if the post is missing."""
        posts = self._fold(self._posts.find_feed_rows(post_id=post_id))
        if not posts:
            raise NotFoundError("Post", post_id)
        return self._resolve_images(posts)[0]

    @staticmethod
    def _fold(rows) -> list[FeedPostView]:
        """Collapse one-row-per-like into one view per post, keeping row order."""
        by_id: dict[str, FeedPostView] = {}
        for row in rows:
            post = by_id.get(row.post_id)
            if post is None:
                post = FeedPostView(
                    id=row.post_id,
                    image_ref=row.image_ref,
                    caption=row.caption,
                    created_at=row.created_at,
                    author_name=row.author_name,
                )
                by_id[row.post_id] = post

            if row.like_id is not None:
                post.likes.append(
                    FeedLikeView(
                        like_id=row.like_id,
                        user_id=row.liker_id,
                        liker_name=row.liker_name,
                    )
                )
        return list(by_id.values())

    def _resolve_images(self, posts: list[FeedPostView]) -> list[FeedPostView]:
        for post in posts:
            post.image_url = self._blob_store.presigned_get(post.image_ref)
        return posts
