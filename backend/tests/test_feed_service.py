"""Tests for the feed read model."""

from datetime import datetime, timedelta

import pytest

from app.exceptions import NotFoundError
from app.models import Like, Post
from app.services.feed_service import FeedService

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0)


@pytest.fixture
def people(make_user):
    return {
        "alice": make_user(),
        "bob": make_user(name="Bob", email="bob@example.com"),
        "carol": make_user(name="Carol", email="carol@example.com"),
    }


def add_post(db, author, image_ref, minutes, caption=None) -> Post:
    post = Post(
        author_id=author.id,
        image_ref=image_ref,
        caption=caption,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )
    db.add(post)
    db.commit()
    return post


def add_like(db, post, user, minutes) -> Like:
    like = Like(post_id=post.id, user_id=user.id, created_at=BASE_TIME + timedelta(minutes=minutes))
    db.add(like)
    db.commit()
    return like


def test_empty_feed(db, blob_store):
    assert FeedService(db, blob_store).list_feed() == []


def test_feed_is_newest_first(db, blob_store, people):
    oldest = add_post(db, people["alice"], "a.png", 0)
    newest = add_post(db, people["bob"], "b.png", 10)
    middle = add_post(db, people["alice"], "c.png", 5)

    feed = FeedService(db, blob_store).list_feed()

    assert [p.id for p in feed] == [newest.id, middle.id, oldest.id]


def test_post_without_likes_has_empty_list(db, blob_store, people):
    add_post(db, people["alice"], "a.png", 0, caption="Sunset")

    [post] = FeedService(db, blob_store).list_feed()

    assert post.likes == []
    assert post.author_name == "Alice"
    assert post.caption == "Sunset"


def test_likes_fold_into_their_post_in_like_order(db, blob_store, people):
    first = add_post(db, people["alice"], "a.png", 0)
    second = add_post(db, people["bob"], "b.png", 1)
    add_like(db, first, people["carol"], 2)
    add_like(db, first, people["bob"], 3)
    add_like(db, second, people["alice"], 4)

    feed = FeedService(db, blob_store).list_feed()

    assert len(feed) == 2
    by_id = {p.id: p for p in feed}
    assert [(lk.user_id, lk.liker_name) for lk in by_id[first.id].likes] == [
        (people["carol"].id, "Carol"),
        (people["bob"].id, "Bob"),
    ]
    assert [lk.liker_name for lk in by_id[second.id].likes] == ["Alice"]


def test_image_ref_is_resolved_to_presigned_url(db, blob_store, people):
    add_post(db, people["alice"], "abc_cat.png", 0)

    [post] = FeedService(db, blob_store).list_feed()

    assert post.image_ref == "abc_cat.png"
    assert post.image_url == "https://blobs.test/abc_cat.png?signature=test"


def test_get_feed_single_post(db, blob_store, people):
    add_post(db, people["alice"], "a.png", 0)
    target = add_post(db, people["bob"], "b.png", 1, caption="Mine")
    add_like(db, target, people["carol"], 2)

    post = FeedService(db, blob_store).get_feed(target.id)

    assert post.id == target.id
    assert post.author_name == "Bob"
    assert [lk.liker_name for lk in post.likes] == ["Carol"]
    assert post.image_url.startswith("https://blobs.test/b.png")


def test_get_feed_missing_post(db, blob_store):
    with pytest.raises(NotFoundError):
        FeedService(db, blob_store).get_feed("no-such-post")
