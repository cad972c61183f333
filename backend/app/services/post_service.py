"""Post creation, editing, deletion and likes."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import transaction
from app.exceptions import ConflictError, ValidationError
from app.models import Post, User
from app.services.blob_store import BlobStore
from app.services.ownership_guard import Capability, ensure_owner
from app.services.repositories import PostRepository

logger = logging.getLogger(__name__)

MIN_CAPTION_LENGTH = 2
MAX_CAPTION_LENGTH = 2200


class PostService:
    """Content mutations. Reads live in FeedService."""

    def __init__(self, db: Session, blob_store: BlobStore) -> None:
        self._db = db
        self._posts = PostRepository(db)
        self._blob_store = blob_store

    @staticmethod
    def check_image_type(mime: str | None) -> None:
        """Reject anything that is not declared as an image."""
        if not mime or not mime.startswith("image/"):
            raise ValidationError(
                "Only image files are allowed", fields={"image": "Only image files are allowed"}
            )

    @staticmethod
    def check_caption(caption: str) -> None:
        """Captions are 2 to 2200 characters, on create and edit alike."""
        if len(caption.strip()) < MIN_CAPTION_LENGTH:
            raise ValidationError(
                "Caption too short",
                fields={"caption": "Caption must be at least 2 characters long"},
            )
        if len(caption) > MAX_CAPTION_LENGTH:
            raise ValidationError(
                "Caption too long",
                fields={"caption": f"Caption must be at most {MAX_CAPTION_LENGTH} characters long"},
            )

    def create_post(
        self,
        author: User,
        image_bytes: bytes,
        mime: str | None,
        filename: str | None = None,
        caption: str | None = None,
    ) -> Post:
        """Upload the image, then record the post.

        A blank caption is stored as no caption. Nothing is written if
        validation or the upload fails.
        """
        self.check_image_type(mime)
        if not image_bytes:
            raise ValidationError("No file was uploaded", fields={"image": "No file was uploaded"})
        if len(image_bytes) > settings.max_upload_bytes:
            raise ValidationError("Image too large", fields={"image": "Image too large"})
        if caption is not None and caption.strip():
            self.check_caption(caption)
        else:
            caption = None

        image_ref = self._blob_store.put(filename, mime, image_bytes)

        with transaction(self._db):
            post = self._posts.create(author_id=author.id, image_ref=image_ref, caption=caption)

        logger.info(f"Post {post.id} created by user {author.id}")
        return post

    def update_post(self, actor: User, post_id: str, caption: str) -> Post:
        """Change a post's caption. Author only."""
        self.check_caption(caption)

        with transaction(self._db):
            post = self._posts.get_by_id(post_id)
            ensure_owner(actor.id, post, Capability.EDIT_POST)
            post.caption = caption
            self._db.flush()

        logger.info(f"Post {post.id} updated by user {actor.id}")
        return post

    def delete_post(self, actor: User, post_id: str) -> None:
        """Delete a post and its likes and comments. Author only."""
        with transaction(self._db):
            post = self._posts.get_by_id(post_id)
            ensure_owner(actor.id, post, Capability.DELETE_POST)
            self._posts.delete(post)

        logger.info(f"Post {post_id} deleted by user {actor.id}")

    def like_post(self, actor: User, post_id: str) -> None:
        """Like a post once. A second like is a conflict."""
        with transaction(self._db):
            self._posts.get_by_id(post_id)
            if self._posts.find_like(post_id, actor.id) is not None:
                raise ConflictError("Post already liked")
            try:
                self._posts.create_like(post_id, actor.id)
            except IntegrityError:
                # Lost a race with a concurrent like from the same user
                raise ConflictError("Post already liked") from None

        logger.info(f"Post {post_id} liked by user {actor.id}")

    def unlike_post(self, actor: User, post_id: str) -> None:
        """Remove the actor's like. Unliking an unliked post is a conflict."""
        with transaction(self._db):
            self._posts.get_by_id(post_id)
            like = self._posts.find_like(post_id, actor.id)
            if like is None:
                raise ConflictError("Post not liked")
            self._posts.delete_like(like)

        logger.info(f"Post {post_id} unliked by user {actor.id}")
