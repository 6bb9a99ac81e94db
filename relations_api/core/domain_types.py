"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, PostId, CategoryId wrap ints; never mix them in domain logic
    - Valid ids lie in 1..MAX_ENTITY_ID; anything outside never reaches the driver
    - Every persisted entity kind and every join relation is an Enum member

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and log extras without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
PostId = NewType("PostId", int)
CategoryId = NewType("CategoryId", int)

# Integer primary keys are 32-bit on every supported backend
MAX_ENTITY_ID = 2**31 - 1


# ─── Enums ───────────────────────────────────────────────────────

class EntityKind(str, Enum):
    """Persisted entity kinds addressable through the entity store."""
    USER = "user"
    PROFILE = "profile"
    POST = "post"
    CATEGORY = "category"

    @property
    def label(self) -> str:
        """Human label used in fixed error messages ("User not found")."""
        return self.value.capitalize()


class Relation(str, Enum):
    """Many-to-many join relations (pair existence is the only state)."""
    POST_CATEGORIES = "post_categories"


class LinkState(str, Enum):
    """Per-pair state of a many-to-many relation."""
    UNLINKED = "unlinked"
    LINKED = "linked"
