"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from logging import getLogger
from typing import TYPE_CHECKING

from shelfsweep.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from shelfsweep.config import get_detection_config
from shelfsweep.domain.model import Category, Product, RecordKind, Tag
from shelfsweep.domain.ports.unit_of_work import CatalogUnitOfWork
from shelfsweep.domain.reconciliation import (
    DuplicateCleanupService,
    DuplicateDetectionService,
    diagnose_catalog,
    fix_catalog,
    in_category,
)

if TYPE_CHECKING:
    from shelfsweep.domain.model import CatalogRecord
    from shelfsweep.domain.ports import CatalogRepositories, RecordPredicate
    from shelfsweep.domain.reconciliation import (
        CleanupOutcome,
        DetectionResult,
        DiagnosticReport,
        FixOutcome,
        NormalizationPolicy,
    )

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


log = getLogger(__name__)


def _resolve_unit_of_work_factory(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyCatalogUnitOfWork


def _resolve_policy(policy: NormalizationPolicy | None) -> NormalizationPolicy:
    return policy or get_detection_config().to_policy()


def _category_predicate(
    repositories: CatalogRepositories,
    kind: RecordKind,
    category_name: str | None,
) -> RecordPredicate | None:
    if category_name is None:
        return None
    if kind is not RecordKind.PRODUCT:
        raise ValueError("A category scope only applies to product scans")
    category = repositories.categories.find_by_name(category_name)
    if category is None:
        raise ValueError(f"Unknown category: {category_name}")
    return in_category(category)


def scan_duplicates(
    kind: RecordKind,
    *,
    category_name: str | None = None,
    policy: NormalizationPolicy | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> DetectionResult[CatalogRecord]:
    """Report duplicate records of ``kind`` without changing the catalog."""

    effective_uow = _resolve_unit_of_work_factory(unit_of_work_factory)
    effective_policy = _resolve_policy(policy)
    log.info("Scanning %s records for duplicates: policy=%s", kind.value, effective_policy)

    with effective_uow() as uow:
        repositories = uow.repositories
        predicate = _category_predicate(repositories, kind, category_name)
        detection = DuplicateDetectionService(repositories.records, effective_policy)
        result = detection.detect(kind, predicate=predicate)

    log.info("Finished scan: %s", result.summary)
    return result


def cleanup_duplicates(
    kind: RecordKind,
    *,
    category_name: str | None = None,
    policy: NormalizationPolicy | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> CleanupOutcome:
    """Fold duplicate records of ``kind`` into their first-seen survivor."""

    effective_uow = _resolve_unit_of_work_factory(unit_of_work_factory)
    effective_policy = _resolve_policy(policy)
    log.info("Cleaning up duplicate %s records", kind.value)

    with effective_uow() as uow:
        repositories = uow.repositories
        predicate = _category_predicate(repositories, kind, category_name)
        store = repositories.records
        cleanup = DuplicateCleanupService(
            store, DuplicateDetectionService(store, effective_policy)
        )
        outcome = cleanup.cleanup(kind, predicate=predicate)

    log.info("Finished cleanup: cleaned=%s, errors=%s", outcome.cleaned, len(outcome.errors))
    return outcome


def diagnose(
    *,
    policy: NormalizationPolicy | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> DiagnosticReport:
    """Run the quick catalog diagnosis."""

    effective_uow = _resolve_unit_of_work_factory(unit_of_work_factory)
    with effective_uow() as uow:
        report = diagnose_catalog(uow.repositories.records, _resolve_policy(policy))
    log.info("Diagnosis finished: %s", report.summary)
    return report


def fix_catalog_issues(
    *,
    policy: NormalizationPolicy | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> FixOutcome:
    """Merge duplicate categories and tags and delete the empty ones."""

    effective_uow = _resolve_unit_of_work_factory(unit_of_work_factory)
    with effective_uow() as uow:
        outcome = fix_catalog(uow.repositories.records, _resolve_policy(policy))
    log.info("Fix finished: fixed=%s, errors=%s", outcome.total_fixed, len(outcome.errors))
    return outcome


def add_record(
    kind: RecordKind,
    name: str,
    *,
    category_name: str | None = None,
    tag_names: Sequence[str] = (),
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> CatalogRecord:
    """Create one record; products may reference categories and tags by name."""

    if kind is not RecordKind.PRODUCT and (category_name is not None or tag_names):
        raise ValueError("Only products can be filed under a category or tagged")

    effective_uow = _resolve_unit_of_work_factory(unit_of_work_factory)
    with effective_uow() as uow:
        repositories = uow.repositories
        record: CatalogRecord
        match kind:
            case RecordKind.CATEGORY:
                record = Category(name=name)
                repositories.categories.add(record)
            case RecordKind.TAG:
                record = Tag(name=name)
                repositories.tags.add(record)
            case RecordKind.PRODUCT:
                product = Product(name=name)
                repositories.products.add(product)
                if category_name is not None:
                    product.assign_category(_category_named(repositories, category_name))
                for tag_name in tag_names:
                    product.add_tag(_tag_named(repositories, tag_name))
                record = product
        uow.commit()

    log.info("Created %s %s (%s)", kind.value, record.id, name)
    return record


def _category_named(repositories: CatalogRepositories, name: str) -> Category:
    category = repositories.categories.find_by_name(name)
    if category is None:
        category = Category(name=name)
        repositories.categories.add(category)
    return category


def _tag_named(repositories: CatalogRepositories, name: str) -> Tag:
    tag = repositories.tags.find_by_name(name)
    if tag is None:
        tag = Tag(name=name)
        repositories.tags.add(tag)
    return tag
