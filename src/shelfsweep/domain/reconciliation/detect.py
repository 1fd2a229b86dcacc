"""Duplicate detection by exact match on a normalized key.

Responsibilities of this stage:
- extract and normalize one key per record
- partition records by normalized key, preserving first-seen order
- report groups that reach the policy's minimum size

Records without a usable key are excluded silently; they are not errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .normalize import NormalizationPolicy, normalize_key

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

log = logging.getLogger(__name__)


type KeyExtractor[T] = Callable[[T], str | None]


@dataclass(frozen=True, slots=True)
class DuplicateGroup[T]:
    """Records sharing one normalized key, in first-seen order."""

    key: str
    items: tuple[T, ...]

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError(f"Duplicate group {self.key!r} must contain at least one item")

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def survivor(self) -> T:
        """The first-seen member; it is the one kept by reconciliation."""
        return self.items[0]

    @property
    def redundant(self) -> tuple[T, ...]:
        return self.items[1:]


@dataclass(frozen=True, slots=True, kw_only=True)
class DetectionResult[T]:
    """Read-only snapshot of one duplicate scan."""

    duplicates: tuple[DuplicateGroup[T], ...] = ()
    total_count: int = 0
    duplicate_count: int = 0
    excluded_count: int = 0
    diagnostic: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.duplicate_count > self.total_count:
            raise ValueError(
                f"duplicate_count ({self.duplicate_count}) exceeds "
                f"total_count ({self.total_count})"
            )

    @classmethod
    def empty(cls, *, diagnostic: str | None = None) -> DetectionResult[T]:
        return cls(diagnostic=diagnostic)

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicates)

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(group.key for group in self.duplicates)

    @property
    def summary(self) -> str:
        if not self.duplicates:
            return "No duplicates found"
        return (
            f"Found {self.duplicate_count} duplicates across {len(self.duplicates)} groups"
        )


def detect_duplicates[T](
    records: Iterable[T],
    key_extractor: KeyExtractor[T],
    policy: NormalizationPolicy = NormalizationPolicy.DEFAULT,
) -> DetectionResult[T]:
    """Group ``records`` by normalized key and keep groups of duplicates."""

    items_by_key: dict[str, list[T]] = {}
    total_count = 0
    excluded_count = 0

    for record in records:
        raw_key = key_extractor(record)
        if raw_key is None:
            excluded_count += 1
            continue
        key = normalize_key(raw_key, policy)
        if policy.ignore_empty and not key:
            excluded_count += 1
            continue
        items_by_key.setdefault(key, []).append(record)
        total_count += 1

    duplicates = tuple(
        DuplicateGroup(key=key, items=tuple(items))
        for key, items in items_by_key.items()
        if len(items) >= policy.minimum_duplicate_count
    )
    duplicate_count = sum(group.count for group in duplicates)

    if excluded_count:
        log.debug("Excluded %s records without a usable key", excluded_count)

    return DetectionResult(
        duplicates=duplicates,
        total_count=total_count,
        duplicate_count=duplicate_count,
        excluded_count=excluded_count,
    )
