"""Posts and feed API router."""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.dependencies.auth import get_current_user
from app.dependencies.storage import get_blob_store
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.post import FeedPost, PostMutationResponse, PostResponse, PostUpdate
from app.services.blob_store import BlobStore
from app.services.feed_service import FeedService
from app.services.post_service import MAX_CAPTION_LENGTH, PostService

router = APIRouter(prefix="/post", tags=["posts"])


@router.get("", response_model=list[FeedPost])
def list_posts(
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    """All posts, newest first, with authors and likers."""
    return FeedService(db, blob_store).list_feed()


@router.post("/create", response_model=PostMutationResponse)
def create_post(
    image: UploadFile = File(...),
    caption: str | None = Form(None, max_length=MAX_CAPTION_LENGTH),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    """Upload an image and create a post."""
    service = PostService(db, blob_store)
    service.check_image_type(image.content_type)
    # One byte past the cap is enough to reject an oversized upload
    data = image.file.read(settings.max_upload_bytes + 1)
    post = service.create_post(
        current_user,
        data,
        image.content_type,
        filename=image.filename,
        caption=caption,
    )
    return {"message": "Post created successfully", "post": PostResponse.model_validate(post)}


@router.get("/{post_id}", response_model=FeedPost)
def get_post(
    post_id: str,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    """A single post with its author and likers."""
    return FeedService(db, blob_store).get_feed(post_id)


@router.patch("/{post_id}", response_model=PostMutationResponse)
def update_post(
    post_id: str,
    data: PostUpdate,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    """Edit a post's caption (author only)."""
    post = PostService(db, blob_store).update_post(current_user, post_id, data.caption)
    return {"message": "Post updated successfully", "post": PostResponse.model_validate(post)}


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    """Delete a post (author only)."""
    PostService(db, blob_store).delete_post(current_user, post_id)
    return {"message": "Post deleted successfully"}


@router.post("/{post_id}/like", response_model=MessageResponse)
def like_post(
    post_id: str,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    """Like a post."""
    PostService(db, blob_store).like_post(current_user, post_id)
    return {"message": "Post liked successfully"}


@router.delete("/{post_id}/like", response_model=MessageResponse)
def unlike_post(
    post_id: str,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    """Remove your like from a post."""
    PostService(db, blob_store).unlike_post(current_user, post_id)
    return {"message": "Post unliked successfully"}
