"""Duplicate detection and reconciliation for catalog records.

Layered flow:
1) normalize one key per record (``normalize``)
2) group records by normalized key (``detect``)
3) pick the first-seen survivor, re-point edges, remove the rest (``reconcile``)
4) commit once through the record store

``service`` binds these stages to a ``RecordStore``; ``diagnostics`` builds the
quick catalog health report and the automatic repair on top of them.
"""

from __future__ import annotations

from .detect import DetectionResult, DuplicateGroup, KeyExtractor, detect_duplicates
from .diagnostics import (
    DiagnosticReport,
    FixOutcome,
    diagnose_catalog,
    fix_catalog,
    remove_empty_labels,
)
from .normalize import NormalizationPolicy, normalize_key
from .reconcile import CleanupOutcome, RedirectAndRemove, StoreRedirector, reconcile_duplicates
from .service import (
    DuplicateCleanupService,
    DuplicateDetectionService,
    in_category,
    record_name,
)

__all__ = [
    "CleanupOutcome",
    "DetectionResult",
    "DiagnosticReport",
    "DuplicateCleanupService",
    "DuplicateDetectionService",
    "DuplicateGroup",
    "FixOutcome",
    "KeyExtractor",
    "NormalizationPolicy",
    "RedirectAndRemove",
    "StoreRedirector",
    "detect_duplicates",
    "diagnose_catalog",
    "fix_catalog",
    "in_category",
    "normalize_key",
    "reconcile_duplicates",
    "record_name",
    "remove_empty_labels",
]
