"""Schemas for post and feed endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class PostUpdate(BaseModel):
    """Schema for editing a caption."""

    caption: str = Field(min_length=2, max_length=2200)


class PostResponse(BaseModel):
    """A post as stored."""

    id: str
    caption: str | None = None
    image_ref: str
    author_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PostMutationResponse(BaseModel):
    """Message plus the post that was created or changed."""

    message: str
    post: PostResponse


class FeedLike(BaseModel):
    """A like as shown in the feed."""

    like_id: str
    user_id: str
    liker_name: str | None = None

    model_config = {"from_attributes": True}


class FeedPost(BaseModel):
    """Denormalized post with author name, likers and a fetchable image URL."""

    id: str
    image_url: str
    caption: str | None = None
    created_at: datetime
    author_name: str | None = None
    likes: list[FeedLike] = []

    model_config = {"from_attributes": True}
