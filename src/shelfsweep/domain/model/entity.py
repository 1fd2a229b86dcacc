"""
Base building blocks:
identity and creation order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from shelfsweep.domain.model.enums import RecordKind


def new_id() -> UUID:
    return uuid4()


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain."""

    id: UUID = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    @property
    def sort_key(self) -> tuple[datetime, str]:
        """Fetch order: oldest first, identity as tie-break."""
        return (self.created_at, str(self.id))


@dataclass(eq=False, kw_only=True)
class Record(Entity):
    """An entity the reconciliation engine can scan for duplicates."""

    # class-level discriminator; subclasses must override
    RECORD_KIND: ClassVar[RecordKind]

    name: str | None = None

    @property
    def kind(self) -> RecordKind:
        return self.RECORD_KIND
