"""Registered asset records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from catalogsync.domain.model.entity import Entity
from catalogsync.domain.model.enums import EntityKind, FileType

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Multimedia(Entity):
    """Uploaded file owned by an owner, deduplicated by content checksum."""

    ENTITY_KIND = EntityKind.MULTIMEDIA
    NATURAL_KEY = ("owner_id", "checksum")
    MUTABLE_FIELDS = frozenset({"url", "alt_text", "file_type"})

    owner_id: UUID
    checksum: str
    url: str
    alt_text: str | None = None
    file_type: FileType = FileType.JPG
