"""Relationship Manager — link, unlink and cascade logic across users, profiles, posts, categories.

Invariants:
    - The only component with cross-entity logic; the store never cascades
    - create_with_profile, delete_user_cascade, replace_post_categories and
      attach_category_to_post run inside one store transaction (all or nothing)
    - Attach and detach are idempotent per (post, category) pair
    - replace_post_categories: ids in both sets end detached (disconnect wins)
    - Graph reads after a mutation always come from a fresh select

Design Decisions:
    - Store injected at construction (EntityStore protocol): no ambient client
    - Missing parents detected from FK failures, not pre-checks, on create paths
    - Profile absence during user deletion is tolerated and logged
    - A user that still owns posts cannot be deleted (409), the profile survives
"""

import logging
from collections.abc import Iterable

from relations_api.core.domain_types import (
    CategoryId, EntityKind, PostId, Relation, UserId,
)
from relations_api.core.errors import (
    ErrorContext,
    LinkNotFoundError,
    MissingReferenceError,
    NotFoundError,
    ReferencedRecordError,
)
from relations_api.core.link_plan import plan_link_changes
from relations_api.core.repository_protocols import EntityStore
from relations_api.infrastructure.observability import operation_context

logger = logging.getLogger(__name__)


class RelationshipManager:
    """One-to-one, one-to-many and many-to-many link operations."""

    def __init__(self, store: EntityStore):
        self.store = store

    # ─── One-to-one: User ↔ Profile ──────────────────────────────

    async def create_with_profile(self, user_fields: dict, bio: str | None):
        """Create a user and its profile atomically; returns the user with profile."""
        async with self.store.transaction():
            user = await self.store.create(EntityKind.USER, user_fields)
            await self.store.create(
                EntityKind.PROFILE, {"user_id": user.id, "bio": bio},
            )
        logger.info(
            "User created with profile",
            extra=operation_context("user", user.id, "create"),
        )
        return await self.get_user(user.id)

    async def get_user(self, user_id: UserId):
        return await self.store.find_by_id(EntityKind.USER, user_id)

    async def attach_profile(self, user_id: UserId, bio: str | None):
        """Give an existing user its (single) profile."""
        async with self.store.transaction():
            try:
                profile = await self.store.create(
                    EntityKind.PROFILE, {"user_id": user_id, "bio": bio},
                )
            except MissingReferenceError as e:
                raise MissingReferenceError(
                    "User not found",
                    ErrorContext(entity="user", entity_id=user_id),
                ) from e
        logger.info(
            "Profile attached",
            extra=operation_context("user", user_id, "create"),
        )
        return profile

    async def update_profile_by_user(self, user_id: UserId, bio: str | None):
        async with self.store.transaction():
            profile = await self.store.find_by_key(
                EntityKind.PROFILE, "user_id", user_id,
            )
            profile = await self.store.update(
                EntityKind.PROFILE, profile.id, {"bio": bio},
            )
        return profile

    async def delete_user_cascade(self, user_id: UserId):
        """Delete the profile (if any), then the user, in one transaction."""
        async with self.store.transaction():
            await self.store.find_by_id(EntityKind.USER, user_id)
            try:
                profile = await self.store.find_by_key(
                    EntityKind.PROFILE, "user_id", user_id,
                )
                await self.store.delete(EntityKind.PROFILE, profile.id)
            except NotFoundError:
                logger.warning(
                    "User has no profile, deleting user only",
                    extra=operation_context("user", user_id, "delete"),
                )
            try:
                user = await self.store.delete(EntityKind.USER, user_id)
            except ReferencedRecordError as e:
                raise ReferencedRecordError(
                    "User still owns posts",
                    ErrorContext(entity="user", entity_id=user_id),
                ) from e
        logger.info(
            "User and profile deleted",
            extra=operation_context("user", user_id, "delete"),
        )
        return user

    # ─── One-to-many: User ↔ Post ────────────────────────────────

    async def create_post_for_user(
        self, user_id: UserId, title: str, content: str | None,
    ):
        async with self.store.transaction():
            try:
                post = await self.store.create(
                    EntityKind.POST,
                    {"user_id": user_id, "title": title, "content": content},
                )
            except MissingReferenceError as e:
                raise MissingReferenceError(
                    "User not found",
                    ErrorContext(entity="user", entity_id=user_id),
                ) from e
        logger.info(
            "Post created",
            extra=operation_context("post", post.id, "create"),
        )
        return await self.get_post(post.id)

    async def list_posts_of_user(self, user_id: UserId):
        """User with its posts, ordered by creation."""
        return await self.store.find_by_id(
            EntityKind.USER, user_id, load=("posts",),
        )

    async def update_post(self, post_id: PostId, fields: dict):
        async with self.store.transaction():
            post = await self.store.update(EntityKind.POST, post_id, fields)
        return post

    async def delete_post(self, post_id: PostId):
        async with self.store.transaction():
            post = await self.store.delete(EntityKind.POST, post_id)
        logger.info(
            "Post deleted",
            extra=operation_context("post", post_id, "delete"),
        )
        return post

    # ─── Many-to-many: Post ↔ Category ───────────────────────────

    async def get_post(self, post_id: PostId):
        return await self.store.find_by_id(EntityKind.POST, post_id)

    async def attach_category_to_post(self, post_id: PostId, category_name: str):
        """Upsert the category by name, then connect it to the post."""
        async with self.store.transaction():
            category = await self.store.upsert_by_unique_key(
                EntityKind.CATEGORY, "name", {"name": category_name},
            )
            try:
                await self.store.link(
                    Relation.POST_CATEGORIES, post_id, {category.id},
                )
            except MissingReferenceError as e:
                raise MissingReferenceError(
                    "Post not found",
                    ErrorContext(entity="post", entity_id=post_id),
                ) from e
        logger.info(
            f"Category '{category_name}' linked",
            extra=operation_context(
                "post", post_id, relation=Relation.POST_CATEGORIES.value,
            ),
        )
        return await self.get_post(post_id)

    async def replace_post_categories(
        self,
        post_id: PostId,
        add_ids: Iterable[CategoryId] | None = None,
        remove_ids: Iterable[CategoryId] | None = None,
    ):
        """Connect add_ids and disconnect remove_ids against the pre-operation state."""
        async with self.store.transaction():
            await self.store.find_by_id(EntityKind.POST, post_id)
            current = await self.store.linked_ids(
                Relation.POST_CATEGORIES, post_id,
            )
            plan = plan_link_changes(current, add_ids, remove_ids)
            try:
                await self.store.link(
                    Relation.POST_CATEGORIES, post_id, set(plan.to_connect),
                )
            except MissingReferenceError as e:
                raise NotFoundError(
                    "Category not found",
                    ErrorContext(
                        entity="category",
                        debug_info={"ids": sorted(plan.to_connect)},
                    ),
                ) from e
            await self.store.unlink(
                Relation.POST_CATEGORIES, post_id, set(plan.to_disconnect),
            )
        if not plan.is_noop:
            logger.info(
                f"Categories changed: +{sorted(plan.to_connect)} "
                f"-{sorted(plan.to_disconnect)}",
                extra=operation_context(
                    "post", post_id, relation=Relation.POST_CATEGORIES.value,
                ),
            )
        return await self.get_post(post_id)

    async def detach_category_from_post(
        self, post_id: PostId, category_id: CategoryId,
    ):
        """Disconnect one pair. Unlinked pair is a no-op; missing endpoint is an error."""
        async with self.store.transaction():
            try:
                await self.store.find_by_id(EntityKind.POST, post_id)
                await self.store.find_by_id(EntityKind.CATEGORY, category_id)
            except NotFoundError as e:
                raise LinkNotFoundError(
                    ErrorContext(entity="post", entity_id=post_id),
                ) from e
            await self.store.unlink(
                Relation.POST_CATEGORIES, post_id, {category_id},
            )
        return await self.get_post(post_id)
