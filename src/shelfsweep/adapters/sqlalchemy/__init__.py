"""SQLAlchemy adapter package for shelfsweep."""

from __future__ import annotations

from .mappings import TABLE_BY_KIND, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyCategoryRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyRecordStore,
    SqlAlchemyRepairRecordRepository,
    SqlAlchemyTagRepository,
)
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "TABLE_BY_KIND",
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyCategoryRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyRecordStore",
    "SqlAlchemyRepairRecordRepository",
    "SqlAlchemyTagRepository",
    "StartupError",
    "configured_engine",
    "is_started",
    "mapper_registry",
    "shutdown",
    "startup",
]
