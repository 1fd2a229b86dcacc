"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    CategoryRepository,
    NamedRecordRepository,
    ProductRepository,
    RecordPredicate,
    RecordStore,
    RecordStoreError,
    RepairRecordRepository,
    Repository,
    TagRepository,
)
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "CategoryRepository",
    "NamedRecordRepository",
    "ProductRepository",
    "RecordPredicate",
    "RecordStore",
    "RecordStoreError",
    "RepairRecordRepository",
    "Repository",
    "RepositoryCollection",
    "TagRepository",
    "UnitOfWork",
]
