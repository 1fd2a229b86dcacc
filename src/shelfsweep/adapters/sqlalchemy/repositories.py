"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from shelfsweep.adapters.sqlalchemy.mappings import (
    TABLE_BY_KIND,
    product_table,
    repair_record_table,
)
from shelfsweep.domain.model import (
    RECORD_CLASS_BY_KIND,
    Category,
    Entity,
    Product,
    RepairRecord,
    Tag,
    detach_record,
    edges_of,
    retarget_edge,
)
from shelfsweep.domain.ports import RecordStoreError

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.orm import Session

    from shelfsweep.domain.model import CatalogRecord, Edge, RecordKind
    from shelfsweep.domain.ports import RecordPredicate

log = logging.getLogger(__name__)


class SqlAlchemyRepository[TEntity: Entity]:
    """Shared add/get helpers for catalog entities."""

    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)

    def get(self, entity_id: uuid.UUID) -> TEntity | None:
        return self.session.get(self._entity_cls, entity_id)


class SqlAlchemyNamedRecordRepository[TRecord: Category | Tag | Product](
    SqlAlchemyRepository[TRecord]
):
    """Name lookups return the oldest record carrying exactly ``name``."""

    def find_by_name(self, name: str) -> TRecord | None:
        table = TABLE_BY_KIND[self._entity_cls.RECORD_KIND]
        stmt = (
            select(self._entity_cls)
            .where(table.c.name == name)
            .order_by(table.c.created_at, table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()


class SqlAlchemyCategoryRepository(SqlAlchemyNamedRecordRepository[Category]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Category)


class SqlAlchemyTagRepository(SqlAlchemyNamedRecordRepository[Tag]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Tag)


class SqlAlchemyProductRepository(SqlAlchemyNamedRecordRepository[Product]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Product)

    def without_category(self) -> list[Product]:
        stmt = (
            select(Product)
            .where(product_table.c.category_id.is_(None))
            .order_by(product_table.c.created_at, product_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyRepairRecordRepository(SqlAlchemyRepository[RepairRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, RepairRecord)


class SqlAlchemyRecordStore:
    """Record store over one session; ``commit`` is the only transaction boundary."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def fetch_all(
        self,
        kind: RecordKind,
        predicate: RecordPredicate | None = None,
    ) -> list[CatalogRecord]:
        table = TABLE_BY_KIND[kind]
        stmt = select(RECORD_CLASS_BY_KIND[kind]).order_by(table.c.created_at, table.c.id)
        try:
            records = cast("list[CatalogRecord]", list(self.session.execute(stmt).scalars()))
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Fetching {kind.value} records failed: {exc}") from exc
        if predicate is None:
            return records
        return [record for record in records if predicate(record)]

    def edges(self, record: CatalogRecord) -> tuple[Edge, ...]:
        return edges_of(record)

    def retarget(self, edge: Edge, to: CatalogRecord) -> None:
        retarget_edge(edge, to)

    def remove(self, record: CatalogRecord) -> None:
        try:
            detach_record(record)
            self.session.delete(record)
        except SQLAlchemyError as exc:
            raise RecordStoreError(
                f"Removing {record.kind.value} record {record.id} failed: {exc}"
            ) from exc

    def orphaned_repair_records(self) -> list[RepairRecord]:
        stmt = (
            select(RepairRecord)
            .where(repair_record_table.c.product_id.is_(None))
            .order_by(repair_record_table.c.created_at, repair_record_table.c.id)
        )
        try:
            return list(self.session.execute(stmt).scalars())
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Fetching orphaned repair records failed: {exc}") from exc

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            log.warning("Rolling back failed commit: %s", exc)
            self.session.rollback()
            raise RecordStoreError(f"Commit failed: {exc}") from exc


if TYPE_CHECKING:
    from shelfsweep.domain.ports import (
        CategoryRepository,
        ProductRepository,
        RecordStore,
        RepairRecordRepository,
        TagRepository,
    )

    _session_stub = cast("Session", object())
    _category_repo: CategoryRepository = SqlAlchemyCategoryRepository(_session_stub)
    _tag_repo: TagRepository = SqlAlchemyTagRepository(_session_stub)
    _product_repo: ProductRepository = SqlAlchemyProductRepository(_session_stub)
    _repair_repo: RepairRecordRepository = SqlAlchemyRepairRecordRepository(_session_stub)
    _store_check: RecordStore = SqlAlchemyRecordStore(_session_stub)
