"""Relationship Manager — one-to-one, one-to-many and many-to-many behavior.

Invariants:
    - create_with_profile is atomic (duplicate email leaves no profile behind)
    - delete_user_cascade tolerates a missing profile and is blocked by posts
    - attach by name is idempotent for both the category row and the link
    - replace_post_categories evaluates against pre-operation state, disconnect wins
    - detach of an unlinked pair is a no-op; a missing endpoint is LinkNotFound
"""

import pytest
from sqlalchemy import func, inspect, select

from relations_api.core.domain_types import EntityKind
from relations_api.core.errors import (
    LinkNotFoundError,
    MissingReferenceError,
    NotFoundError,
    ReferencedRecordError,
    ValidationFailedError,
)
from relations_api.models import Category, Profile, User


@pytest.fixture
async def author(manager):
    user = await manager.create_with_profile(
        {"email": "ada@example.com", "name": "Ada"}, "Mathematician",
    )
    return user.id


@pytest.fixture
async def post_id(manager, author):
    post = await manager.create_post_for_user(author, "Notes", "On the engine")
    return post.id


@pytest.fixture
async def category_ids(store):
    async with store.transaction():
        created = [
            await store.create(EntityKind.CATEGORY, {"name": name})
            for name in ("a", "b", "c", "d", "e")
        ]
    return [c.id for c in created]


# --- One-to-one ---------------------------------------------------------------

async def test_create_with_profile_embeds_bio(manager, author):
    user = await manager.get_user(author)
    assert user.profile is not None
    assert user.profile.bio == "Mathematician"
    assert user.profile.user_id == author


async def test_duplicate_email_creates_no_profile(manager, author, test_db):
    with pytest.raises(ValidationFailedError):
        await manager.create_with_profile(
            {"email": "ada@example.com", "name": "Other"}, "Impostor",
        )
    assert await test_db.scalar(select(func.count()).select_from(User)) == 1
    assert await test_db.scalar(select(func.count()).select_from(Profile)) == 1


async def test_update_profile_by_user(manager, author):
    profile = await manager.update_profile_by_user(author, "Analyst")
    assert profile.bio == "Analyst"
    assert (await manager.get_user(author)).profile.bio == "Analyst"


async def test_update_profile_without_profile_is_not_found(manager, store):
    async with store.transaction():
        bare = await store.create(EntityKind.USER, {"email": "bare@example.com"})
    with pytest.raises(NotFoundError) as exc:
        await manager.update_profile_by_user(bare.id, "x")
    assert exc.value.message == "Profile not found"


async def test_attach_profile_later(manager, store):
    async with store.transaction():
        bare = await store.create(EntityKind.USER, {"email": "bare@example.com"})
    bare_id = bare.id
    profile = await manager.attach_profile(bare_id, "Late bio")
    assert profile.user_id == bare_id
    assert (await manager.get_user(bare_id)).profile.bio == "Late bio"


async def test_second_profile_for_same_user_rejected(manager, author):
    with pytest.raises(ValidationFailedError) as exc:
        await manager.attach_profile(author, "Another")
    assert "user_id" in exc.value.message


async def test_attach_profile_to_missing_user(manager):
    with pytest.raises(MissingReferenceError) as exc:
        await manager.attach_profile(404, "Nobody")
    assert exc.value.message == "User not found"


async def test_delete_user_cascade_removes_profile_first(manager, author, test_db):
    await manager.delete_user_cascade(author)
    assert await test_db.scalar(select(func.count()).select_from(User)) == 0
    assert await test_db.scalar(select(func.count()).select_from(Profile)) == 0


async def test_delete_user_without_profile_succeeds(manager, store):
    async with store.transaction():
        bare = await store.create(EntityKind.USER, {"email": "bare@example.com"})
    bare_id = bare.id
    await manager.delete_user_cascade(bare_id)
    with pytest.raises(NotFoundError):
        await manager.get_user(bare_id)


async def test_delete_missing_user_is_not_found(manager):
    with pytest.raises(NotFoundError) as exc:
        await manager.delete_user_cascade(404)
    assert exc.value.message == "User not found"


async def test_delete_user_with_posts_is_blocked_and_keeps_profile(
    manager, author, post_id, test_db,
):
    with pytest.raises(ReferencedRecordError):
        await manager.delete_user_cascade(author)
    assert await test_db.scalar(select(func.count()).select_from(Profile)) == 1
    assert (await manager.get_user(author)).profile.bio == "Mathematician"


# --- One-to-many --------------------------------------------------------------

async def test_create_post_for_missing_user(manager):
    with pytest.raises(MissingReferenceError) as exc:
        await manager.create_post_for_user(404, "Lost", None)
    assert exc.value.message == "User not found"


async def test_posts_listed_in_creation_order(manager, author):
    for title in ("first", "second", "third"):
        await manager.create_post_for_user(author, title, None)
    user = await manager.list_posts_of_user(author)
    assert [p.title for p in user.posts] == ["first", "second", "third"]


async def test_get_user_leaves_posts_unloaded(manager, author):
    await manager.create_post_for_user(author, "first", None)
    user = await manager.get_user(author)
    assert "posts" in inspect(user).unloaded
    assert user.profile is not None

    user = await manager.list_posts_of_user(author)
    assert "posts" not in inspect(user).unloaded
    assert [p.title for p in user.posts] == ["first"]


async def test_update_and_delete_post_by_identity(manager, post_id):
    post = await manager.update_post(post_id, {"title": "Renamed"})
    assert post.title == "Renamed"
    assert post.content == "On the engine"
    await manager.delete_post(post_id)
    with pytest.raises(NotFoundError) as exc:
        await manager.get_post(post_id)
    assert exc.value.message == "Post not found"


async def test_delete_missing_post_is_not_found(manager):
    with pytest.raises(NotFoundError):
        await manager.delete_post(404)


# --- Many-to-many -------------------------------------------------------------

async def test_attach_same_name_twice_is_idempotent(manager, post_id, test_db):
    await manager.attach_category_to_post(post_id, "tech")
    post = await manager.attach_category_to_post(post_id, "tech")
    assert [c.name for c in post.categories] == ["tech"]
    assert await test_db.scalar(select(func.count()).select_from(Category)) == 1


async def test_attach_existing_category_to_second_post_reuses_row(
    manager, author, post_id, test_db,
):
    other = await manager.create_post_for_user(author, "Other", None)
    first = await manager.attach_category_to_post(post_id, "tech")
    second = await manager.attach_category_to_post(other.id, "tech")
    assert first.categories[0].id == second.categories[0].id
    assert await test_db.scalar(select(func.count()).select_from(Category)) == 1


async def test_attach_to_missing_post_rolls_back_new_category(manager, test_db):
    with pytest.raises(MissingReferenceError) as exc:
        await manager.attach_category_to_post(404, "ghost")
    assert exc.value.message == "Post not found"
    assert await test_db.scalar(select(func.count()).select_from(Category)) == 0


async def test_replace_add_and_remove_overlap(manager, post_id, category_ids):
    a, b = category_ids[0], category_ids[1]
    post = await manager.replace_post_categories(post_id, [a, b], [b])
    assert [c.id for c in post.categories] == [a]


async def test_replace_same_id_in_both_sets_ends_detached(
    manager, post_id, category_ids,
):
    target = category_ids[4]
    await manager.replace_post_categories(post_id, [target], None)
    post = await manager.replace_post_categories(post_id, [target], [target])
    assert post.categories == []


async def test_replace_with_absent_sets_is_noop(manager, post_id, category_ids):
    await manager.replace_post_categories(post_id, category_ids[:2], None)
    post = await manager.replace_post_categories(post_id, None, None)
    assert [c.id for c in post.categories] == category_ids[:2]


async def test_replace_connect_and_disconnect_together(
    manager, post_id, category_ids,
):
    a, b, c = category_ids[:3]
    await manager.replace_post_categories(post_id, [a, b], None)
    post = await manager.replace_post_categories(post_id, [c], [a])
    assert [cat.id for cat in post.categories] == [b, c]


async def test_replace_missing_post(manager, category_ids):
    with pytest.raises(NotFoundError) as exc:
        await manager.replace_post_categories(404, category_ids[:1], None)
    assert exc.value.message == "Post not found"


async def test_replace_unknown_category_changes_nothing(
    manager, post_id, category_ids,
):
    a = category_ids[0]
    await manager.replace_post_categories(post_id, [a], None)
    with pytest.raises(NotFoundError) as exc:
        await manager.replace_post_categories(post_id, [category_ids[1], 999], [a])
    assert exc.value.message == "Category not found"
    assert [c.id for c in (await manager.get_post(post_id)).categories] == [a]


async def test_detach_unlinked_category_is_noop(manager, post_id, category_ids):
    await manager.replace_post_categories(post_id, category_ids[:1], None)
    post = await manager.detach_category_from_post(post_id, category_ids[3])
    assert [c.id for c in post.categories] == category_ids[:1]


async def test_detach_linked_category(manager, post_id, category_ids):
    await manager.replace_post_categories(post_id, category_ids[:2], None)
    post = await manager.detach_category_from_post(post_id, category_ids[0])
    assert [c.id for c in post.categories] == [category_ids[1]]


async def test_detach_with_missing_endpoint_is_link_not_found(
    manager, post_id, category_ids,
):
    with pytest.raises(LinkNotFoundError):
        await manager.detach_category_from_post(post_id, 999)
    with pytest.raises(LinkNotFoundError):
        await manager.detach_category_from_post(999, category_ids[0])
