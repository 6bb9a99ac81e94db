"""Post Routes — identity-based post updates and Post ↔ Category link maintenance.

Invariants:
    - Post update/delete address a post by id only (no ownership check)
    - Every category route answers with the post and its current categories
    - PUT /{post_id}/categories maps failures like its sibling routes (404/400)
"""

import logging

from fastapi import APIRouter, Depends, status

from relations_api.api.dependencies import EntityIdPath, get_relationship_manager
from relations_api.schemas.base import MessageResponse
from relations_api.schemas.post import (
    CategoryAttach, CategoryChanges, PostResponse, PostUpdate, PostWithCategories,
)
from relations_api.services.relationship_manager import RelationshipManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/{post_id}", response_model=PostWithCategories)
async def get_post(
    post_id: EntityIdPath,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    return await manager.get_post(post_id)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: EntityIdPath,
    body: PostUpdate,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    return await manager.update_post(post_id, body.model_dump(exclude_none=True))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: EntityIdPath,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    await manager.delete_post(post_id)
    return MessageResponse(message="Post deleted")


@router.post(
    "/{post_id}/categories", response_model=PostWithCategories,
    status_code=status.HTTP_201_CREATED,
)
async def attach_category(
    post_id: EntityIdPath,
    body: CategoryAttach,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    """Find-or-create the category by name and link it to the post."""
    return await manager.attach_category_to_post(post_id, body.name)


@router.put("/{post_id}/categories", response_model=PostWithCategories)
async def replace_categories(
    post_id: EntityIdPath,
    body: CategoryChanges,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    return await manager.replace_post_categories(
        post_id, body.categories_to_add, body.categories_to_remove,
    )


@router.delete(
    "/{post_id}/categories/{category_id}", response_model=PostWithCategories,
)
async def detach_category(
    post_id: EntityIdPath,
    category_id: EntityIdPath,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    return await manager.detach_category_from_post(post_id, category_id)
