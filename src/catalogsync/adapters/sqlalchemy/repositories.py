"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from catalogsync.adapters.sqlalchemy.mappings import (
    TABLE_BY_CLASS,
    property_table,
    property_variant_table,
)
from catalogsync.domain.model import Property, PropertyVariant

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session

    from catalogsync.domain.model import Reconcilable

log = logging.getLogger(__name__)


class SqlAlchemyCatalogRepository:
    """Natural-key reads and constraint-guarded inserts over one session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find[TEntity: Reconcilable](
        self, kind: type[TEntity], key: Mapping[str, object]
    ) -> TEntity | None:
        table = TABLE_BY_CLASS[kind]
        stmt = select(kind)
        for name, value in key.items():
            column = table.c[name]
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        return self.session.execute(stmt).scalar_one_or_none()

    def insert_if_absent(self, entity: Reconcilable) -> bool:
        """Insert ``entity`` inside a savepoint; a unique-key collision leaves no trace.

        Only a collision on the natural key counts as losing the insert. Any
        other constraint violation is a store failure and propagates.
        """

        try:
            with self.session.begin_nested():
                self.session.add(entity)
        except IntegrityError as exc:
            key = dict(zip(entity.NATURAL_KEY, entity.natural_key(), strict=True))
            if self.find(type(entity), key) is None:
                raise
            log.debug(
                "Insert of %s %r rejected by the store: %s",
                entity.entity_kind,
                entity.natural_key(),
                exc.orig,
            )
            return False
        return True

    def global_properties(self, owner_id: UUID) -> Sequence[Property]:
        stmt = (
            select(Property)
            .where(property_table.c.owner_id == owner_id)
            .where(property_table.c.product_id.is_(None))
            .order_by(property_table.c.name)
        )
        return self.session.execute(stmt).scalars().all()

    def variants_of(self, property_ids: Iterable[UUID]) -> Sequence[PropertyVariant]:
        """Variants of the given properties, ordered by property name then variant name."""

        ids = list(property_ids)
        if not ids:
            return ()
        stmt = (
            select(PropertyVariant)
            .join(property_table, property_table.c.id == property_variant_table.c.property_id)
            .where(property_variant_table.c.property_id.in_(ids))
            .order_by(property_table.c.name, property_variant_table.c.name)
        )
        return self.session.execute(stmt).scalars().all()
