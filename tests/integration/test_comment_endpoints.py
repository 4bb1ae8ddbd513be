"""
Integration tests for comment endpoints and comment moderation.
"""

import pytest

from zenith.models import Comment, CommentStatus, PostStatus
from tests.utils_jwt import auth_header_for


@pytest.fixture
def published_post(author, make_post):
    return make_post(author, status=PostStatus.PUBLISHED)


@pytest.fixture
def pending_comment(db_session, published_post, other_user):
    comment = Comment(content="Nice post", status=CommentStatus.PENDING, post_id=published_post.id, author_id=other_user.id)
    db_session.add(comment)
    db_session.commit()
    db_session.refresh(comment)
    return comment


def test_comment_lifecycle(client, published_post, other_user, moderator):
    """A new comment stays hidden until a moderator approves it."""
    commenter = auth_header_for(other_user)

    created = client.post(f"/api/v1/posts/{published_post.id}/comments", json={"content": "Great read"}, headers=commenter)
    assert created.status_code == 201
    comment = created.json()
    assert comment["status"] == "PENDING"
    assert comment["author_username"] == "bob"

    public = client.get(f"/api/v1/posts/{published_post.id}/comments")
    assert public.json()["total_elements"] == 0

    approved = client.patch(f"/api/v1/moderator/comments/{comment['id']}/approve", headers=auth_header_for(moderator))
    assert approved.status_code == 200
    assert approved.json()["status"] == "APPROVED"

    public = client.get(f"/api/v1/posts/{published_post.id}/comments")
    assert [c["id"] for c in public.json()["content"]] == [comment["id"]]

    post = client.get(f"/api/v1/posts/{published_post.id}")
    assert post.json()["comment_count"] == 1


def test_comment_on_draft_rejected(client, author, other_user, make_post):
    draft = make_post(author, status=PostStatus.DRAFT)

    response = client.post(
        f"/api/v1/posts/{draft.id}/comments", json={"content": "First"}, headers=auth_header_for(other_user)
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Cannot comment on unpublished post"


def test_comment_requires_authentication(client, published_post):
    response = client.post(f"/api/v1/posts/{published_post.id}/comments", json={"content": "Anon"})

    assert response.status_code == 401


def test_empty_comment_rejected(client, published_post, auth_header):
    response = client.post(f"/api/v1/posts/{published_post.id}/comments", json={"content": ""}, headers=auth_header)

    assert response.status_code == 400


def test_comments_of_missing_post(client):
    response = client.get("/api/v1/posts/999/comments")

    assert response.status_code == 404


def test_comments_of_draft_hidden_from_public(client, db_session, author, other_user, make_post):
    draft = make_post(author, status=PostStatus.DRAFT)
    db_session.add(Comment(content="Early", status=CommentStatus.APPROVED, post_id=draft.id, author_id=other_user.id))
    db_session.commit()

    anonymous = client.get(f"/api/v1/posts/{draft.id}/comments")
    stranger = client.get(f"/api/v1/posts/{draft.id}/comments", headers=auth_header_for(other_user))
    owner = client.get(f"/api/v1/posts/{draft.id}/comments", headers=auth_header_for(author))

    assert anonymous.status_code == 401
    assert stranger.status_code == 403
    assert [c["content"] for c in owner.json()["content"]] == ["Early"]


def test_author_edits_own_comment(client, pending_comment, other_user):
    response = client.put(
        f"/api/v1/comments/{pending_comment.id}", json={"content": "Edited"}, headers=auth_header_for(other_user)
    )

    assert response.status_code == 200
    assert response.json()["content"] == "Edited"
    assert response.json()["status"] == "PENDING"


def test_stranger_cannot_edit_comment(client, pending_comment, auth_header):
    response = client.put(f"/api/v1/comments/{pending_comment.id}", json={"content": "Edited"}, headers=auth_header)

    assert response.status_code == 403


def test_delete_archives_comment(client, db_session, pending_comment, other_user):
    response = client.delete(f"/api/v1/comments/{pending_comment.id}", headers=auth_header_for(other_user))

    assert response.status_code == 204
    db_session.refresh(pending_comment)
    assert pending_comment.status == CommentStatus.ARCHIVED


def test_my_comments(client, pending_comment, other_user):
    response = client.get("/api/v1/comments/my", headers=auth_header_for(other_user))

    assert response.status_code == 200
    assert [c["id"] for c in response.json()["content"]] == [pending_comment.id]


def test_moderation_queue(client, pending_comment, moderator, auth_header):
    staff = client.get("/api/v1/moderator/comments", params={"status": "PENDING"}, headers=auth_header_for(moderator))
    regular = client.get("/api/v1/moderator/comments", headers=auth_header)

    assert staff.status_code == 200
    assert [c["id"] for c in staff.json()["content"]] == [pending_comment.id]
    assert regular.status_code == 403


def test_mark_spam_twice(client, pending_comment, moderator):
    header = auth_header_for(moderator)

    first = client.patch(f"/api/v1/moderator/comments/{pending_comment.id}/spam", headers=header)
    second = client.patch(f"/api/v1/moderator/comments/{pending_comment.id}/spam", headers=header)

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["status"] == "SPAM"


def test_set_status_by_query(client, pending_comment, admin):
    response = client.patch(
        f"/api/v1/moderator/comments/{pending_comment.id}/status",
        params={"status": "ARCHIVED"},
        headers=auth_header_for(admin),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "ARCHIVED"


def test_bulk_status(client, pending_comment, moderator):
    response = client.patch(
        "/api/v1/moderator/comments/bulk-status",
        json={"commentIds": [pending_comment.id], "status": "APPROVED"},
        headers=auth_header_for(moderator),
    )

    assert response.status_code == 200
    assert [c["status"] for c in response.json()] == ["APPROVED"]


def test_bulk_status_unknown_id(client, pending_comment, moderator):
    response = client.patch(
        "/api/v1/moderator/comments/bulk-status",
        json={"commentIds": [pending_comment.id, 555], "status": "APPROVED"},
        headers=auth_header_for(moderator),
    )

    assert response.status_code == 404
    assert response.json()["error"]["details"] == {"missing_ids": [555]}
