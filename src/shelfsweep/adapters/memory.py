"""List-backed record store.

Records are returned in insertion order. Link changes apply immediately;
deletions stay pending until ``commit``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shelfsweep.domain.model import Product, detach_record, edges_of, retarget_edge
from shelfsweep.domain.ports import RecordStoreError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shelfsweep.domain.model import CatalogRecord, Edge, RecordKind, RepairRecord
    from shelfsweep.domain.ports import RecordPredicate

log = logging.getLogger(__name__)


class InMemoryRecordStore:
    def __init__(
        self,
        records: Iterable[CatalogRecord] = (),
        *,
        repair_records: Iterable[RepairRecord] = (),
    ) -> None:
        self._records: list[CatalogRecord] = []
        self._pending_removals: list[CatalogRecord] = []
        self._repair_records: list[RepairRecord] = []
        self.commits = 0
        self.fetch_error: Exception | None = None
        self.commit_error: Exception | None = None
        for record in records:
            self.add(record)
        for repair in repair_records:
            self._track_repair_record(repair)

    def add(self, record: CatalogRecord) -> None:
        if record not in self._records:
            self._records.append(record)
        if isinstance(record, Product):
            for repair in record.repair_records:
                self._track_repair_record(repair)

    def fetch_all(
        self,
        kind: RecordKind,
        predicate: RecordPredicate | None = None,
    ) -> list[CatalogRecord]:
        if self.fetch_error is not None:
            raise RecordStoreError(f"Fetching {kind.value} records failed") from self.fetch_error
        return [
            record
            for record in self._records
            if record.kind == kind
            and record not in self._pending_removals
            and (predicate is None or predicate(record))
        ]

    def edges(self, record: CatalogRecord) -> tuple[Edge, ...]:
        return edges_of(record)

    def retarget(self, edge: Edge, to: CatalogRecord) -> None:
        retarget_edge(edge, to)

    def remove(self, record: CatalogRecord) -> None:
        if record not in self._records:
            raise RecordStoreError(f"Unknown {record.kind.value} record {record.id}")
        if isinstance(record, Product):
            for repair in record.repair_records:
                self._track_repair_record(repair)
        detach_record(record)
        if record not in self._pending_removals:
            self._pending_removals.append(record)

    def orphaned_repair_records(self) -> list[RepairRecord]:
        if self.fetch_error is not None:
            raise RecordStoreError("Fetching repair records failed") from self.fetch_error
        return [repair for repair in self._repair_records if repair.product is None]

    def commit(self) -> None:
        if self.commit_error is not None:
            raise RecordStoreError(str(self.commit_error)) from self.commit_error
        removed = len(self._pending_removals)
        self._records = [
            record for record in self._records if record not in self._pending_removals
        ]
        self._pending_removals.clear()
        self.commits += 1
        log.debug("Committed in-memory store: removed=%s", removed)

    def _track_repair_record(self, repair: RepairRecord) -> None:
        if repair not in self._repair_records:
            self._repair_records.append(repair)

    def __contains__(self, record: object) -> bool:
        return record in self._records and record not in self._pending_removals
