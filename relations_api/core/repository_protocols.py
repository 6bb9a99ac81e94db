"""Boundary Protocols — contracts between the relationship core and the store shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - The store performs no cascades; cross-entity logic lives in the manager

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: every store method is potentially-blocking IO
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Iterable, Protocol

from relations_api.core.domain_types import EntityKind, Relation


class EntityStore(Protocol):
    """Contract for generic entity persistence, implemented by shell."""

    async def create(self, kind: EntityKind, fields: dict) -> Any: ...
    async def find_by_id(
        self, kind: EntityKind, entity_id: int, load: Iterable[str] = (),
    ) -> Any: ...
    async def find_by_key(self, kind: EntityKind, key: str, value: Any) -> Any: ...
    async def update(self, kind: EntityKind, entity_id: int, fields: dict) -> Any: ...
    async def delete(self, kind: EntityKind, entity_id: int) -> Any: ...
    async def upsert_by_unique_key(
        self, kind: EntityKind, key: str, create_fields: dict,
    ) -> Any: ...

    async def link(
        self, relation: Relation, owner_id: int, target_ids: set[int],
    ) -> None: ...
    async def unlink(
        self, relation: Relation, owner_id: int, target_ids: set[int],
    ) -> None: ...
    async def linked_ids(self, relation: Relation, owner_id: int) -> set[int]: ...

    def transaction(self) -> AbstractAsyncContextManager["EntityStore"]: ...
