"""Quick catalog diagnosis and automatic repair.

The diagnosis reports duplicate names, products without a category, repair
records without a product and unused categories or tags. ``fix_catalog``
merges duplicate categories and tags, then deletes the labels left empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from shelfsweep.domain.model import Category, Product, RecordKind, Tag
from shelfsweep.domain.ports import RecordStoreError

from .detect import detect_duplicates
from .normalize import NormalizationPolicy
from .reconcile import CleanupOutcome, StoreRedirector, reconcile_duplicates
from .service import DuplicateDetectionService, record_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shelfsweep.domain.ports import RecordStore

log = logging.getLogger(__name__)

UNCATEGORIZED_LABEL: Final[str] = "Uncategorized"


@dataclass(frozen=True, slots=True, kw_only=True)
class DiagnosticReport:
    duplicate_categories: tuple[str, ...] = ()
    duplicate_tags: tuple[str, ...] = ()
    # "<category> - <product key>", one entry per duplicate group
    duplicate_products: tuple[str, ...] = ()
    orphaned_products: int = 0
    orphaned_repair_records: int = 0
    empty_categories: tuple[str, ...] = ()
    empty_tags: tuple[str, ...] = ()
    diagnostics: tuple[str, ...] = ()

    @property
    def has_issues(self) -> bool:
        return self.issue_count > 0

    @property
    def issue_count(self) -> int:
        return (
            len(self.duplicate_categories)
            + len(self.duplicate_tags)
            + len(self.duplicate_products)
            + self.orphaned_products
            + self.orphaned_repair_records
            + len(self.empty_categories)
            + len(self.empty_tags)
        )

    @property
    def summary(self) -> str:
        if not self.has_issues:
            return "Catalog looks healthy"
        issues: list[str] = []
        if self.duplicate_categories:
            issues.append(f"{len(self.duplicate_categories)} duplicate categories")
        if self.duplicate_tags:
            issues.append(f"{len(self.duplicate_tags)} duplicate tags")
        if self.duplicate_products:
            issues.append(f"{len(self.duplicate_products)} duplicate products")
        if self.orphaned_products:
            issues.append(f"{self.orphaned_products} products without category")
        if self.orphaned_repair_records:
            issues.append(f"{self.orphaned_repair_records} repair records without product")
        if self.empty_categories:
            issues.append(f"{len(self.empty_categories)} empty categories")
        if self.empty_tags:
            issues.append(f"{len(self.empty_tags)} unused tags")
        return "Found issues: " + ", ".join(issues)


@dataclass(frozen=True, slots=True)
class FixOutcome:
    """Counts of one automatic repair run. Not persisted."""

    duplicates_fixed: int = 0
    empty_labels_removed: int = 0
    errors: tuple[str, ...] = ()

    @property
    def total_fixed(self) -> int:
        return self.duplicates_fixed + self.empty_labels_removed

    @property
    def succeeded(self) -> bool:
        return not self.errors

    @property
    def summary(self) -> str:
        if self.succeeded:
            return f"Fixed {self.total_fixed} issues"
        return f"Fixed {self.total_fixed} issues with {len(self.errors)} errors"


def diagnose_catalog(
    store: RecordStore,
    policy: NormalizationPolicy | None = None,
) -> DiagnosticReport:
    """Run the duplicate scans plus the orphan checks against ``store``."""

    detection = DuplicateDetectionService(store, policy or NormalizationPolicy.DEFAULT)
    categories = detection.detect_duplicate_categories()
    tags = detection.detect_duplicate_tags()
    diagnostics = tuple(
        result.diagnostic for result in (categories, tags) if result.diagnostic is not None
    )
    if diagnostics:
        return DiagnosticReport(diagnostics=diagnostics)

    try:
        all_categories = _fetch(store, RecordKind.CATEGORY, Category)
        all_tags = _fetch(store, RecordKind.TAG, Tag)
        all_products = _fetch(store, RecordKind.PRODUCT, Product)
        orphaned_repairs = store.orphaned_repair_records()
    except RecordStoreError as exc:
        log.error("Failed to fetch records for diagnosis: %s", exc)  # noqa: TRY400
        return DiagnosticReport(diagnostics=(f"Failed to fetch records: {exc}",))

    return DiagnosticReport(
        duplicate_categories=categories.keys,
        duplicate_tags=tags.keys,
        duplicate_products=_duplicate_products(all_products, detection.policy),
        orphaned_products=sum(1 for product in all_products if product.category is None),
        orphaned_repair_records=len(orphaned_repairs),
        empty_categories=tuple(
            category.name or "" for category in all_categories if not category.products
        ),
        empty_tags=tuple(tag.name or "" for tag in all_tags if not tag.products),
    )


def fix_catalog(
    store: RecordStore,
    policy: NormalizationPolicy | None = None,
) -> FixOutcome:
    """Merge duplicate categories and tags, then delete empty ones.

    Each stage commits once; a failing record or commit is recorded and the
    run carries on.
    """

    detection = DuplicateDetectionService(store, policy or NormalizationPolicy.DEFAULT)
    results = (detection.detect_duplicate_categories(), detection.detect_duplicate_tags())
    diagnostics = tuple(
        result.diagnostic for result in results if result.diagnostic is not None
    )
    if diagnostics:
        return FixOutcome(errors=diagnostics)

    merged = reconcile_duplicates(
        [group for result in results for group in result.duplicates],
        redirect_and_remove=StoreRedirector(store),
        commit=store.commit,
    )
    emptied = remove_empty_labels(store)

    outcome = FixOutcome(
        duplicates_fixed=merged.cleaned,
        empty_labels_removed=emptied.cleaned,
        errors=merged.errors + emptied.errors,
    )
    log.info("Catalog repair finished: %s", outcome.summary)
    return outcome


def remove_empty_labels(store: RecordStore) -> CleanupOutcome:
    """Delete categories and tags without products, committing once."""

    try:
        labels: list[Category | Tag] = [
            *_fetch(store, RecordKind.CATEGORY, Category),
            *_fetch(store, RecordKind.TAG, Tag),
        ]
    except RecordStoreError as exc:
        log.error("Failed to fetch labels: %s", exc)  # noqa: TRY400
        return CleanupOutcome(errors=(f"Failed to fetch records: {exc}",))

    cleaned = 0
    errors: list[str] = []
    for label in labels:
        if label.products:
            continue
        try:
            store.remove(label)
        except RecordStoreError as exc:
            log.warning("Failed to delete empty %s %r: %s", label.kind.value, label.name, exc)
            errors.append(f"Failed to delete empty {label.kind.value} '{label.name}': {exc}")
        else:
            cleaned += 1

    try:
        store.commit()
    except Exception as exc:  # noqa: BLE001
        log.error("Failed to commit label cleanup: %s", exc)  # noqa: TRY400
        errors.append(f"Failed to save cleanup results: {exc}")

    return CleanupOutcome(cleaned=cleaned, errors=tuple(errors))


def _duplicate_products(
    products: Iterable[Product],
    policy: NormalizationPolicy,
) -> tuple[str, ...]:
    by_category: dict[Category | None, list[Product]] = {}
    for product in products:
        by_category.setdefault(product.category, []).append(product)

    labels: list[str] = []
    for category, members in by_category.items():
        label = UNCATEGORIZED_LABEL if category is None else (category.name or "")
        result = detect_duplicates(members, record_name, policy)
        labels.extend(f"{label} - {key}" for key in result.keys)
    return tuple(labels)


def _fetch[T](store: RecordStore, kind: RecordKind, cls: type[T]) -> list[T]:
    return [record for record in store.fetch_all(kind) if isinstance(record, cls)]
