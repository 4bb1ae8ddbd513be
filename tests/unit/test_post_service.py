"""
Unit tests for PostService.

This module tests:
- Post creation defaults, slugs, reading time and tag resolution
- Ownership rules for update and delete
- Visibility of unpublished posts
- Published listing filters and moderation status changes
"""

import pytest

from zenith.core.exceptions import ForbiddenError, ResourceNotFoundError, UnauthorizedError, ValidationError
from zenith.models import Category, Comment, Post, PostStatus, Tag, post_tags
from zenith.schemas.post import PostCreate, PostUpdate
from zenith.services.base import PageParams
from zenith.services.post import PostService, calculate_reading_time


def post_payload(category, **overrides):
    data = {"title": "Hello World", "content": "A short post", "category_id": category.id}
    data.update(overrides)
    return PostCreate(**data)


class TestReadingTime:
    @pytest.mark.parametrize(
        "words, minutes",
        [(0, 0), (1, 1), (200, 1), (201, 2), (1000, 5)],
    )
    def test_rounds_up_per_200_words(self, words, minutes):
        assert calculate_reading_time(" ".join(["word"] * words)) == minutes

    def test_blank_content(self):
        assert calculate_reading_time("   \n ") == 0
        assert calculate_reading_time(None) == 0


class TestCreatePost:
    """Test post creation."""

    def test_create_defaults_to_draft(self, db_session, author_actor, category):
        """
        Test the default status of a new post.

        This test ensures that a post created without an explicit
        status starts as DRAFT and belongs to the caller.
        """
        # Act
        post = PostService.create_post(db_session, author_actor, post_payload(category))

        # Assert
        assert post.status == PostStatus.DRAFT
        assert post.author_id == author_actor.user_id
        assert post.author_username == "alice"
        assert post.category_name == "Engineering"
        assert post.slug == "hello-world"
        assert post.reading_time == 1

    def test_slug_collision_gets_counter_suffix(self, db_session, author_actor, category):
        first = PostService.create_post(db_session, author_actor, post_payload(category))
        second = PostService.create_post(db_session, author_actor, post_payload(category))
        third = PostService.create_post(db_session, author_actor, post_payload(category))

        assert [first.slug, second.slug, third.slug] == ["hello-world", "hello-world-1", "hello-world-2"]

    def test_tag_names_reuse_existing_case_insensitively(self, db_session, author_actor, category):
        # Arrange
        db_session.add(Tag(name="Python"))
        db_session.commit()

        # Act
        post = PostService.create_post(
            db_session, author_actor, post_payload(category, tags=["python", "FastAPI", "fastapi"])
        )

        # Assert: existing spelling kept, duplicates collapsed, one new tag
        assert sorted(post.tags) == ["FastAPI", "Python"]
        assert post.tag_count == 2
        assert db_session.query(Tag).count() == 2

    def test_tag_ids_are_resolved(self, db_session, author_actor, category):
        tag = Tag(name="sql")
        db_session.add(tag)
        db_session.commit()

        post = PostService.create_post(db_session, author_actor, post_payload(category, tag_ids=[tag.id]))

        assert post.tags == ["sql"]

    def test_unknown_tag_id_fails_and_creates_nothing(self, db_session, author_actor, category):
        with pytest.raises(ResourceNotFoundError):
            PostService.create_post(db_session, author_actor, post_payload(category, tag_ids=[404], tags=["new"]))

        assert db_session.query(Post).count() == 0
        assert db_session.query(Tag).count() == 0

    def test_missing_category_fails(self, db_session, author_actor):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            PostService.create_post(db_session, author_actor, PostCreate(title="t", content="c", category_id=77))

        assert exc_info.value.message == "Category not found with id: 77"

    def test_regular_user_cannot_create_published_post(self, db_session, author_actor, category):
        with pytest.raises(ForbiddenError):
            PostService.create_post(db_session, author_actor, post_payload(category, status=PostStatus.PUBLISHED))

    def test_staff_can_create_published_post(self, db_session, moderator_actor, category):
        post = PostService.create_post(db_session, moderator_actor, post_payload(category, status=PostStatus.PUBLISHED))

        assert post.status == PostStatus.PUBLISHED


class TestUpdatePost:
    """Test partial updates and the ownership rule."""

    def test_partial_update_keeps_unset_fields(self, db_session, author_actor, category):
        # Arrange
        created = PostService.create_post(db_session, author_actor, post_payload(category, tags=["one"]))

        # Act: blank title and empty tag list are ignored
        updated = PostService.update_post(
            db_session, author_actor, created.id, PostUpdate(title="  ", content="Rewritten body", tags=[])
        )

        # Assert
        assert updated.title == "Hello World"
        assert updated.slug == "hello-world"
        assert updated.content == "Rewritten body"
        assert updated.tags == ["one"]
        assert updated.category_id == category.id

    def test_title_change_regenerates_slug(self, db_session, author_actor, category):
        created = PostService.create_post(db_session, author_actor, post_payload(category))

        updated = PostService.update_post(db_session, author_actor, created.id, PostUpdate(title="Second Thoughts"))

        assert updated.slug == "second-thoughts"

    def test_category_and_tags_replaced_when_given(self, db_session, author_actor, category):
        other = Category(name="Life")
        db_session.add(other)
        db_session.commit()
        created = PostService.create_post(db_session, author_actor, post_payload(category, tags=["old"]))

        updated = PostService.update_post(
            db_session, author_actor, created.id, PostUpdate(category_id=other.id, tags=["new"])
        )

        assert updated.category_id == other.id
        assert updated.tags == ["new"]

    def test_stranger_cannot_update(self, db_session, author, other_actor, make_post):
        """
        Test updating someone else's post.

        This test ensures that a regular user who is not the author
        receives Forbidden and the post is unchanged.
        """
        post = make_post(author, title="Original")

        with pytest.raises(ForbiddenError):
            PostService.update_post(db_session, other_actor, post.id, PostUpdate(title="Defaced"))

        db_session.refresh(post)
        assert post.title == "Original"

    @pytest.mark.parametrize("actor_fixture", ["author_actor", "moderator_actor", "admin_actor"])
    def test_owner_and_staff_can_update(self, request, db_session, author, make_post, actor_fixture):
        post = make_post(author)
        actor = request.getfixturevalue(actor_fixture)

        updated = PostService.update_post(db_session, actor, post.id, PostUpdate(content="Edited"))

        assert updated.content == "Edited"

    def test_update_missing_post(self, db_session, author_actor):
        with pytest.raises(ResourceNotFoundError):
            PostService.update_post(db_session, author_actor, 123, PostUpdate(content="x"))


class TestDeletePost:
    def test_delete_removes_comments_and_tag_links(self, db_session, author, other_user, author_actor, make_post):
        # Arrange
        tag = Tag(name="keep-me")
        db_session.add(tag)
        db_session.commit()
        post = make_post(author, tags=[tag])
        db_session.add(Comment(content="nice", post_id=post.id, author_id=other_user.id))
        db_session.commit()
        post_id = post.id

        # Act
        PostService.delete_post(db_session, author_actor, post_id)

        # Assert
        assert db_session.query(Post).filter(Post.id == post_id).first() is None
        assert db_session.query(Comment).count() == 0
        assert db_session.execute(post_tags.select()).fetchall() == []
        assert db_session.query(Tag).count() == 1

    def test_stranger_cannot_delete(self, db_session, author, other_actor, make_post):
        post = make_post(author)

        with pytest.raises(ForbiddenError):
            PostService.delete_post(db_session, other_actor, post.id)

        assert db_session.query(Post).count() == 1

    @pytest.mark.parametrize("actor_fixture", ["moderator_actor", "admin_actor"])
    def test_staff_can_delete(self, request, db_session, author, make_post, actor_fixture):
        post = make_post(author)

        PostService.delete_post(db_session, request.getfixturevalue(actor_fixture), post.id)

        assert db_session.query(Post).count() == 0


class TestVisibility:
    def test_published_post_is_public(self, db_session, author, make_post):
        post = make_post(author, status=PostStatus.PUBLISHED)

        assert PostService.get_post(db_session, None, post.id).id == post.id

    def test_draft_hidden_from_anonymous(self, db_session, author, make_post):
        post = make_post(author, status=PostStatus.DRAFT)

        with pytest.raises(UnauthorizedError):
            PostService.get_post(db_session, None, post.id)

    def test_draft_hidden_from_stranger(self, db_session, author, other_actor, make_post):
        post = make_post(author, status=PostStatus.DRAFT)

        with pytest.raises(ForbiddenError):
            PostService.get_post(db_session, other_actor, post.id)

    def test_draft_visible_to_owner_and_moderator(self, db_session, author, author_actor, moderator_actor, make_post):
        post = make_post(author, status=PostStatus.ARCHIVED)

        assert PostService.get_post(db_session, author_actor, post.id).status == PostStatus.ARCHIVED
        assert PostService.get_post(db_session, moderator_actor, post.id).status == PostStatus.ARCHIVED

    def test_get_by_slug_applies_same_rule(self, db_session, author, make_post):
        post = make_post(author, status=PostStatus.DRAFT)

        with pytest.raises(UnauthorizedError):
            PostService.get_post_by_slug(db_session, None, post.slug)
        with pytest.raises(ResourceNotFoundError):
            PostService.get_post_by_slug(db_session, None, "no-such-post")


class TestListings:
    def test_published_listing_only_shows_published(self, db_session, author, make_post):
        published = make_post(author, status=PostStatus.PUBLISHED)
        make_post(author, status=PostStatus.DRAFT)
        make_post(author, status=PostStatus.ARCHIVED)

        page = PostService.list_published(db_session, PageParams())

        assert [post.id for post in page.content] == [published.id]

    def test_published_listing_filters(self, db_session, author, make_post, category):
        # Arrange
        other_category = Category(name="Travel")
        tag = Tag(name="Rust")
        db_session.add_all([other_category, tag])
        db_session.commit()
        tagged = make_post(author, tags=[tag])
        elsewhere = make_post(author, category_id=other_category.id)

        # Act
        by_tag = PostService.list_published(db_session, PageParams(), tag="rust")
        by_category = PostService.list_published(db_session, PageParams(), category_id=other_category.id)

        # Assert
        assert [post.id for post in by_tag.content] == [tagged.id]
        assert [post.id for post in by_category.content] == [elsewhere.id]

    def test_listing_sorted_by_title_desc(self, db_session, author, make_post):
        for title in ["b", "c", "a"]:
            make_post(author, title=title)

        page = PostService.list_published(db_session, PageParams(sort_by="title", sort_direction="desc"))

        assert [post.title for post in page.content] == ["c", "b", "a"]

    def test_invalid_sort_field(self, db_session):
        with pytest.raises(ValidationError):
            PostService.list_published(db_session, PageParams(sort_by="password"))

    def test_my_posts_with_status_filter(self, db_session, author, other_user, author_actor, make_post):
        draft = make_post(author, status=PostStatus.DRAFT)
        make_post(author, status=PostStatus.PUBLISHED)
        make_post(other_user, status=PostStatus.DRAFT)

        page = PostService.list_my_posts(db_session, author_actor, PageParams(), status=PostStatus.DRAFT)

        assert [post.id for post in page.content] == [draft.id]

    def test_moderation_listing_by_any_status(self, db_session, author, other_user, moderator_actor, make_post):
        make_post(author, status=PostStatus.DRAFT)
        archived = make_post(other_user, status=PostStatus.ARCHIVED)

        page = PostService.list_by_status(db_session, moderator_actor, PageParams(), status=PostStatus.ARCHIVED)
        everything = PostService.list_by_status(db_session, moderator_actor, PageParams())

        assert [post.id for post in page.content] == [archived.id]
        assert everything.total_elements == 2

    def test_moderation_listing_requires_staff(self, db_session, author_actor):
        with pytest.raises(ForbiddenError):
            PostService.list_by_status(db_session, author_actor, PageParams())


class TestStatusChanges:
    @pytest.mark.parametrize(
        "start, target",
        [
            (PostStatus.DRAFT, PostStatus.PUBLISHED),
            (PostStatus.PUBLISHED, PostStatus.DRAFT),
            (PostStatus.ARCHIVED, PostStatus.PUBLISHED),
            (PostStatus.DRAFT, PostStatus.DRAFT),
        ],
    )
    def test_any_transition_is_allowed(self, db_session, author, moderator_actor, make_post, start, target):
        post = make_post(author, status=start)

        updated = PostService.update_status(db_session, moderator_actor, post.id, target)

        assert updated.status == target

    def test_publish(self, db_session, author, admin_actor, make_post):
        post = make_post(author, status=PostStatus.DRAFT)

        assert PostService.publish_post(db_session, admin_actor, post.id).status == PostStatus.PUBLISHED

    def test_author_cannot_change_status(self, db_session, author, author_actor, make_post):
        post = make_post(author, status=PostStatus.DRAFT)

        with pytest.raises(ForbiddenError):
            PostService.publish_post(db_session, author_actor, post.id)
