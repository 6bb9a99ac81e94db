"""User Routes — one-to-one profile and one-to-many post operations.

Invariants:
    - Path ids are integers in 1..MAX_ENTITY_ID; anything else is rejected with 400
    - Failures surface through RelationsError handlers with fixed messages
      ("User not found", "Profile not found")
"""

import logging

from fastapi import APIRouter, Depends, status

from relations_api.api.dependencies import EntityIdPath, get_relationship_manager
from relations_api.schemas.base import MessageResponse
from relations_api.schemas.post import PostCreate, PostResponse
from relations_api.schemas.user import (
    ProfileCreate, ProfileResponse, ProfileUpdate,
    UserCreate, UserWithPosts, UserWithProfile,
)
from relations_api.services.relationship_manager import RelationshipManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "", response_model=UserWithProfile, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    """Create a user together with its profile."""
    return await manager.create_with_profile(
        {"email": body.email, "name": body.name}, body.bio,
    )


@router.get("/{user_id}", response_model=UserWithProfile)
async def get_user(
    user_id: EntityIdPath,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    return await manager.get_user(user_id)


@router.post(
    "/{user_id}/profile", response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def attach_profile(
    user_id: EntityIdPath,
    body: ProfileCreate,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    """Attach a profile to a user created without one."""
    return await manager.attach_profile(user_id, body.bio)


@router.put("/{user_id}/profile", response_model=ProfileResponse)
async def update_profile(
    user_id: EntityIdPath,
    body: ProfileUpdate,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    return await manager.update_profile_by_user(user_id, body.bio)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: EntityIdPath,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    """Delete the profile, then the user."""
    await manager.delete_user_cascade(user_id)
    return MessageResponse(message="User and profile deleted")


@router.post(
    "/{user_id}/posts", response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    user_id: EntityIdPath,
    body: PostCreate,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    return await manager.create_post_for_user(user_id, body.title, body.content)


@router.get("/{user_id}/posts", response_model=UserWithPosts)
async def list_posts(
    user_id: EntityIdPath,
    manager: RelationshipManager = Depends(get_relationship_manager),
):
    return await manager.list_posts_of_user(user_id)
