"""Store-backed duplicate detection and cleanup services."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shelfsweep.domain.model import Category, Product, RecordKind
from shelfsweep.domain.ports import RecordStoreError

from .detect import DetectionResult, detect_duplicates
from .normalize import NormalizationPolicy
from .reconcile import CleanupOutcome, StoreRedirector, reconcile_duplicates

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shelfsweep.domain.model import CatalogRecord
    from shelfsweep.domain.ports import RecordPredicate, RecordStore

    from .detect import DuplicateGroup, KeyExtractor

log = logging.getLogger(__name__)


def record_name(record: CatalogRecord) -> str | None:
    """Default key field: the record's display name."""
    return record.name


def in_category(category: Category) -> RecordPredicate:
    """Predicate matching products filed under ``category``."""

    def predicate(record: CatalogRecord) -> bool:
        return isinstance(record, Product) and record.category is category

    return predicate


class DuplicateDetectionService:
    """Scan a record store for duplicate records of one kind."""

    def __init__(
        self,
        store: RecordStore,
        policy: NormalizationPolicy = NormalizationPolicy.DEFAULT,
    ) -> None:
        self.store = store
        self.policy = policy

    def detect(
        self,
        kind: RecordKind,
        *,
        key_extractor: KeyExtractor[CatalogRecord] = record_name,
        predicate: RecordPredicate | None = None,
    ) -> DetectionResult[CatalogRecord]:
        try:
            records = self.store.fetch_all(kind, predicate)
        except RecordStoreError as exc:
            log.error("Failed to fetch %s records: %s", kind.value, exc)  # noqa: TRY400
            diagnostic = f"Failed to fetch {kind.value} records: {exc}"
            return DetectionResult.empty(diagnostic=diagnostic)

        result = detect_duplicates(records, key_extractor, self.policy)
        log.info(
            "Scanned %s records: total=%s, duplicates=%s, groups=%s",
            kind.value,
            result.total_count,
            result.duplicate_count,
            len(result.duplicates),
        )
        return result

    def detect_duplicate_categories(self) -> DetectionResult[CatalogRecord]:
        return self.detect(RecordKind.CATEGORY)

    def detect_duplicate_tags(self) -> DetectionResult[CatalogRecord]:
        return self.detect(RecordKind.TAG)

    def detect_duplicate_products(
        self, *, category: Category | None = None
    ) -> DetectionResult[CatalogRecord]:
        predicate = None if category is None else in_category(category)
        return self.detect(RecordKind.PRODUCT, predicate=predicate)


class DuplicateCleanupService:
    """Detect duplicates and fold them into their first-seen survivor."""

    def __init__(
        self,
        store: RecordStore,
        detection: DuplicateDetectionService | None = None,
    ) -> None:
        self.store = store
        self.detection = detection or DuplicateDetectionService(store)
        self._redirector = StoreRedirector(store)

    def cleanup(
        self,
        kind: RecordKind,
        *,
        predicate: RecordPredicate | None = None,
    ) -> CleanupOutcome:
        result = self.detection.detect(kind, predicate=predicate)
        if result.diagnostic is not None:
            return CleanupOutcome(errors=(result.diagnostic,))
        return self.cleanup_groups(result.duplicates)

    def cleanup_groups(self, groups: Iterable[DuplicateGroup[CatalogRecord]]) -> CleanupOutcome:
        return reconcile_duplicates(
            groups,
            redirect_and_remove=self._redirector,
            commit=self.store.commit,
        )

    def cleanup_duplicate_categories(self) -> CleanupOutcome:
        return self.cleanup(RecordKind.CATEGORY)

    def cleanup_duplicate_tags(self) -> CleanupOutcome:
        return self.cleanup(RecordKind.TAG)

    def cleanup_duplicate_products(self, *, category: Category | None = None) -> CleanupOutcome:
        predicate = None if category is None else in_category(category)
        return self.cleanup(RecordKind.PRODUCT, predicate=predicate)

