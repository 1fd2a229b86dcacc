"""Catalog domain model."""

from __future__ import annotations

from shelfsweep.domain.model.catalog import Category, Product, RepairRecord, Tag
from shelfsweep.domain.model.edges import (
    CatalogRecord,
    Edge,
    detach_record,
    edges_of,
    retarget_edge,
)
from shelfsweep.domain.model.entity import Entity, Record, new_id, utcnow
from shelfsweep.domain.model.enums import EdgeKind, RecordKind

RECORD_CLASS_BY_KIND: dict[RecordKind, type[Category | Tag | Product]] = {
    RecordKind.CATEGORY: Category,
    RecordKind.TAG: Tag,
    RecordKind.PRODUCT: Product,
}

__all__ = [
    "RECORD_CLASS_BY_KIND",
    "CatalogRecord",
    "Category",
    "Edge",
    "EdgeKind",
    "Entity",
    "Product",
    "Record",
    "RecordKind",
    "RepairRecord",
    "Tag",
    "detach_record",
    "edges_of",
    "new_id",
    "retarget_edge",
    "utcnow",
]
