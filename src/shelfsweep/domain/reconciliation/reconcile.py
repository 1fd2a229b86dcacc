"""Reconciliation of duplicate groups.

Per group, the first-seen member survives; every relationship edge of the
other members is re-pointed to the survivor before they are removed. Groups
are processed sequentially and independently: a failing group is recorded and
the loop moves on. All mutations are persisted by one ``commit`` at the end.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from shelfsweep.domain.model import CatalogRecord
    from shelfsweep.domain.ports import RecordStore

    from .detect import DuplicateGroup

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CleanupOutcome:
    """Result of one reconciliation run. Not persisted."""

    cleaned: int = 0
    errors: tuple[str, ...] = ()

    @property
    def succeeded(self) -> bool:
        return not self.errors

    @property
    def summary(self) -> str:
        if self.succeeded:
            return f"Removed {self.cleaned} duplicates"
        return f"Removed {self.cleaned} duplicates with {len(self.errors)} errors"


class RedirectAndRemove[T](Protocol):
    """Re-point the group's edges to ``survivor`` and drop the rest; return removals."""

    def __call__(self, survivor: T, group: DuplicateGroup[T]) -> int: ...


def reconcile_duplicates[T](
    groups: Iterable[DuplicateGroup[T]],
    *,
    redirect_and_remove: RedirectAndRemove[T],
    commit: Callable[[], None],
) -> CleanupOutcome:
    """Reconcile ``groups`` in order, collecting per-group failures."""

    cleaned = 0
    errors: list[str] = []

    for group in groups:
        try:
            cleaned += redirect_and_remove(group.survivor, group)
        except Exception as exc:  # noqa: BLE001
            log.warning("Failed to reconcile duplicate group %r: %s", group.key, exc)
            errors.append(f"Failed to clean up duplicates '{group.key}': {exc}")

    try:
        commit()
    except Exception as exc:  # noqa: BLE001
        log.error("Failed to commit reconciliation: %s", exc)  # noqa: TRY400
        errors.append(f"Failed to save cleanup results: {exc}")

    log.info("Reconciliation finished: cleaned=%s, errors=%s", cleaned, len(errors))
    return CleanupOutcome(cleaned=cleaned, errors=tuple(errors))


class StoreRedirector:
    """Default ``redirect_and_remove`` backed by a ``RecordStore``."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def __call__(self, survivor: CatalogRecord, group: DuplicateGroup[CatalogRecord]) -> int:
        removed = 0
        for member in group.items:
            if member is survivor:
                continue
            for edge in self.store.edges(member):
                self.store.retarget(edge, survivor)
            self.store.remove(member)
            removed += 1
        return removed
