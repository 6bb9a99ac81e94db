"""Post Schemas — posts, categories and the category link-maintenance payloads.

Invariants:
    - PostUpdate fields left out or null are not changed
    - CategoryChanges: absent list means no-op for that direction
    - Category ids outside 1..MAX_ENTITY_ID fail validation in either list
"""

from datetime import datetime

from relations_api.schemas.base import ApiModel, EntityIdField


class PostCreate(ApiModel):
    title: str
    content: str | None = None


class PostUpdate(ApiModel):
    title: str | None = None
    content: str | None = None


class CategoryAttach(ApiModel):
    name: str


class CategoryChanges(ApiModel):
    """Connect/disconnect request; ids in both lists end disconnected."""
    categories_to_add: list[EntityIdField] | None = None
    categories_to_remove: list[EntityIdField] | None = None


class CategoryResponse(ApiModel):
    id: int
    name: str


class PostResponse(ApiModel):
    id: int
    title: str
    content: str | None
    user_id: int
    created_at: datetime


class PostWithCategories(PostResponse):
    categories: list[CategoryResponse] = []
