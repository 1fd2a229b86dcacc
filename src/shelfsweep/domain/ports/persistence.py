"""Ports for persisting and reconciling catalog records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from shelfsweep.domain.model import Category, Product, RepairRecord, Tag

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

    from shelfsweep.domain.model import CatalogRecord, Edge, RecordKind


type RecordPredicate = Callable[[CatalogRecord], bool]


class RecordStoreError(RuntimeError):
    """Raised when the backing store cannot fetch or persist records."""


@runtime_checkable
class RecordStore(Protocol):
    """Storage collaborator of the reconciliation engine."""

    def fetch_all(
        self,
        kind: RecordKind,
        predicate: RecordPredicate | None = None,
    ) -> Sequence[CatalogRecord]:
        """Return records of ``kind`` in fetch order (oldest first)."""
        ...

    def edges(self, record: CatalogRecord) -> Sequence[Edge]: ...

    def retarget(self, edge: Edge, to: CatalogRecord) -> None: ...

    def remove(self, record: CatalogRecord) -> None:
        """Unlink ``record`` from every neighbor and schedule its deletion."""
        ...

    def orphaned_repair_records(self) -> Sequence[RepairRecord]:
        """Return repair records that no longer belong to a product."""
        ...

    def commit(self) -> None:
        """Persist pending mutations atomically or raise ``RecordStoreError``."""
        ...


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class NamedRecordRepository[TRecord](Repository[TRecord], Protocol):
    """Repository contract for records looked up by display name."""

    def find_by_name(self, name: str) -> TRecord | None: ...


@runtime_checkable
class CategoryRepository(NamedRecordRepository[Category], Protocol):
    """Repository contract for categories."""


@runtime_checkable
class TagRepository(NamedRecordRepository[Tag], Protocol):
    """Repository contract for tags."""


@runtime_checkable
class ProductRepository(NamedRecordRepository[Product], Protocol):
    """Repository contract for products."""

    def without_category(self) -> Sequence[Product]: ...


@runtime_checkable
class RepairRecordRepository(Repository[RepairRecord], Protocol):
    """Repository contract for repair records."""
