"""SQLAlchemy mapping metadata for the catalog domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import Final

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Numeric,
    String,
    Table,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from shelfsweep.domain.model import Category, Product, RecordKind, RepairRecord, Tag

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

category_table = Table(
    "category",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, index=True),
)

tag_table = Table(
    "tag",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, index=True),
)

product_table = Table(
    "product",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=True),
    Column("brand", String, nullable=True),
    Column("model", String, nullable=True),
    Column(
        "category_id",
        UUIDColumnType,
        ForeignKey("category.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    ),
    Column("created_at", UTCDateTime(), nullable=False, index=True),
)

product_tag_table = Table(
    "product_tag",
    mapper_registry.metadata,
    Column(
        "product_id",
        UUIDColumnType,
        ForeignKey("product.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("tag_id", UUIDColumnType, ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True),
)

repair_record_table = Table(
    "repair_record",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("summary", String, nullable=False),
    Column("cost", Numeric(12, 2), nullable=True),
    Column(
        "product_id",
        UUIDColumnType,
        ForeignKey("product.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    ),
    Column("created_at", UTCDateTime(), nullable=False),
)

TABLE_BY_KIND: Final[dict[RecordKind, Table]] = {
    RecordKind.CATEGORY: category_table,
    RecordKind.TAG: tag_table,
    RecordKind.PRODUCT: product_table,
}


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(
        Category,
        category_table,
        properties={
            "_products": relationship(
                Product,
                back_populates="_category",
                order_by=product_table.c.created_at,
            ),
        },
    )

    mapper_registry.map_imperatively(
        Tag,
        tag_table,
        properties={
            "_products": relationship(
                Product,
                secondary=product_tag_table,
                back_populates="_tags",
                order_by=product_table.c.created_at,
            ),
        },
    )

    mapper_registry.map_imperatively(
        Product,
        product_table,
        properties={
            "_category": relationship(
                Category,
                back_populates="_products",
            ),
            "_tags": relationship(
                Tag,
                secondary=product_tag_table,
                back_populates="_products",
                order_by=tag_table.c.created_at,
            ),
            "_repair_records": relationship(
                RepairRecord,
                back_populates="_product",
                order_by=repair_record_table.c.created_at,
            ),
        },
    )

    mapper_registry.map_imperatively(
        RepairRecord,
        repair_record_table,
        properties={
            "_product": relationship(
                Product,
                back_populates="_repair_records",
            ),
        },
    )

    configure_mappers()
    return mapper_registry

