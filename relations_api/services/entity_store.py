"""Entity Store — generic create/read/update/delete/upsert against typed records.

Invariants:
    - Every operation is parameterized by EntityKind; no per-entity methods
    - Mutations only flush; commit/rollback belongs to transaction()
    - IntegrityError never escapes: unique violations → ValidationFailedError,
      missing FK parent on write → MissingReferenceError, FK-blocked delete →
      ReferencedRecordError
    - No cascading behavior lives here (DB-level join cleanup aside)

Design Decisions:
    - Reads use populate_existing: link rows are written with Core statements, so
      cached collections in the identity map must be refreshed on every read
    - Deletes are Core DELETE statements: the ORM would otherwise null out child
      FKs instead of letting the database enforce RESTRICT/CASCADE
    - upsert_by_unique_key is one INSERT ... ON CONFLICT DO NOTHING plus a keyed
      select, so concurrent attaches of the same new name cannot duplicate a row
    - Collections a response does not need stay unloaded; callers name the
      ones they want through find_by_id(load=...)
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable

from sqlalchemy import Table, delete, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from relations_api.core.domain_types import EntityKind, Relation
from relations_api.core.errors import (
    ErrorContext,
    MissingReferenceError,
    NotFoundError,
    ReferencedRecordError,
    RelationsError,
    ValidationFailedError,
)
from relations_api.infrastructure.observability import operation_context
from relations_api.models import Category, Post, Profile, User, post_categories

logger = logging.getLogger(__name__)

_MODELS = {
    EntityKind.USER: User,
    EntityKind.PROFILE: Profile,
    EntityKind.POST: Post,
    EntityKind.CATEGORY: Category,
}

_UNIQUE_KEYS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.USER: ("email",),
    EntityKind.PROFILE: ("user_id",),
    EntityKind.POST: (),
    EntityKind.CATEGORY: ("name",),
}

# relation -> (join table, owner column, target column)
_RELATIONS: dict[Relation, tuple[Table, str, str]] = {
    Relation.POST_CATEGORIES: (post_categories, "post_id", "category_id"),
}

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _map_integrity_error(
    kind: EntityKind, exc: IntegrityError, operation: str,
    context: ErrorContext | None = None,
) -> RelationsError:
    """Translate a driver integrity failure into the error taxonomy."""
    text = str(exc.orig).lower()
    if "foreign key" in text:
        if operation == "delete":
            return ReferencedRecordError(
                f"{kind.label} is still referenced by other records", context,
            )
        return MissingReferenceError(
            f"Referenced record for {kind.label} not found", context,
        )
    if "unique" in text or "duplicate" in text:
        keys = _UNIQUE_KEYS[kind]
        fields = [key for key in keys if key in text] or list(keys)
        return ValidationFailedError(
            f"Unique constraint failed on the fields: ({', '.join(fields)})",
            context,
        )
    return ValidationFailedError(f"Invalid {kind.value} data", context)


class SqlEntityStore:
    """SQLAlchemy implementation of the EntityStore protocol."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["SqlEntityStore"]:
        """All-or-nothing unit of work: commit on success, rollback on any error."""
        try:
            yield self
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    # ─── Records ─────────────────────────────────────────────────

    async def create(self, kind: EntityKind, fields: dict) -> Any:
        record = _MODELS[kind](**fields)
        self.db.add(record)
        await self._flush(kind, "create")
        return record

    async def find_by_id(
        self, kind: EntityKind, entity_id: int, load: Iterable[str] = (),
    ) -> Any:
        """Fetch one record; load names extra relationships to eager-load."""
        model = _MODELS[kind]
        record = await self._find_one(kind, model.id == entity_id, load)
        if record is None:
            raise NotFoundError(
                f"{kind.label} not found",
                ErrorContext(entity=kind.value, entity_id=entity_id),
            )
        return record

    async def find_by_key(self, kind: EntityKind, key: str, value: Any) -> Any:
        record = await self._find_one(kind, getattr(_MODELS[kind], key) == value)
        if record is None:
            raise NotFoundError(
                f"{kind.label} not found",
                ErrorContext(entity=kind.value, debug_info={key: value}),
            )
        return record

    async def update(self, kind: EntityKind, entity_id: int, fields: dict) -> Any:
        record = await self.find_by_id(kind, entity_id)
        for name, value in fields.items():
            setattr(record, name, value)
        await self._flush(kind, "update")
        return record

    async def delete(self, kind: EntityKind, entity_id: int) -> Any:
        table = _MODELS[kind].__table__
        record = await self.find_by_id(kind, entity_id)
        try:
            await self.db.execute(delete(table).where(table.c.id == entity_id))
        except IntegrityError as e:
            raise _map_integrity_error(
                kind, e, "delete",
                ErrorContext(entity=kind.value, entity_id=entity_id),
            ) from e
        self.db.expunge(record)
        return record

    async def upsert_by_unique_key(
        self, kind: EntityKind, key: str, create_fields: dict,
    ) -> Any:
        """Return the record matching create_fields[key], creating it if absent."""
        if key not in _UNIQUE_KEYS[kind]:
            raise ValueError(f"{key!r} is not a unique key of {kind.value}")
        model = _MODELS[kind]
        value = create_fields[key]

        dialect_insert = _DIALECT_INSERTS.get(self._dialect_name)
        if dialect_insert is None:
            existing = await self._find_one(kind, getattr(model, key) == value)
            if existing is not None:
                return existing
            return await self.create(kind, create_fields)

        stmt = (
            dialect_insert(model)
            .values(**create_fields)
            .on_conflict_do_nothing(index_elements=[key])
        )
        try:
            await self.db.execute(stmt)
        except IntegrityError as e:
            raise _map_integrity_error(kind, e, "create") from e
        return await self.find_by_key(kind, key, value)

    # ─── Links ───────────────────────────────────────────────────

    async def link(
        self, relation: Relation, owner_id: int, target_ids: set[int],
    ) -> None:
        """Connect owner to every target; already-linked pairs are skipped."""
        if not target_ids:
            return
        table, owner_col, target_col = _RELATIONS[relation]
        dialect_insert = _DIALECT_INSERTS.get(self._dialect_name)
        if dialect_insert is None:
            target_ids = target_ids - await self.linked_ids(relation, owner_id)
            if not target_ids:
                return
            stmt = insert(table)
        else:
            stmt = dialect_insert(table).on_conflict_do_nothing()
        rows = [
            {owner_col: owner_id, target_col: target_id}
            for target_id in sorted(target_ids)
        ]
        try:
            await self.db.execute(stmt, rows)
        except IntegrityError as e:
            raise MissingReferenceError(
                f"Referenced record for {relation.value} not found",
                ErrorContext(entity=relation.value, entity_id=owner_id),
            ) from e

    async def unlink(
        self, relation: Relation, owner_id: int, target_ids: set[int],
    ) -> None:
        """Disconnect owner from every target; absent pairs are skipped."""
        if not target_ids:
            return
        table, owner_col, target_col = _RELATIONS[relation]
        await self.db.execute(
            delete(table)
            .where(table.c[owner_col] == owner_id)
            .where(table.c[target_col].in_(target_ids)),
        )

    async def linked_ids(self, relation: Relation, owner_id: int) -> set[int]:
        table, owner_col, target_col = _RELATIONS[relation]
        result = await self.db.execute(
            select(table.c[target_col]).where(table.c[owner_col] == owner_id),
        )
        return set(result.scalars().all())

    # ─── Helpers ─────────────────────────────────────────────────

    @property
    def _dialect_name(self) -> str:
        return self.db.get_bind().dialect.name

    async def _find_one(
        self, kind: EntityKind, criterion, load: Iterable[str] = (),
    ) -> Any:
        model = _MODELS[kind]
        result = await self.db.execute(
            select(model)
            .where(criterion)
            .options(*(selectinload(getattr(model, name)) for name in load))
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def _flush(self, kind: EntityKind, operation: str) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            logger.info(
                f"{operation} rejected by constraint",
                extra=operation_context(kind.value, operation=operation),
            )
            raise _map_integrity_error(kind, e, operation) from e
