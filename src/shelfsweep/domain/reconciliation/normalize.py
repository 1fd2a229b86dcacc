"""Key normalization for duplicate detection.

Keys are compared by exact equality after normalization. Internal
whitespace, punctuation and the Unicode normal form are left untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar


@dataclass(frozen=True, slots=True, kw_only=True)
class NormalizationPolicy:
    """How a raw key field is reduced to a comparable string."""

    case_sensitive: bool = False
    trim_whitespace: bool = True
    ignore_empty: bool = True
    minimum_duplicate_count: int = 2

    DEFAULT: ClassVar[NormalizationPolicy]

    def __post_init__(self) -> None:
        if self.minimum_duplicate_count < 1:
            raise ValueError(
                f"minimum_duplicate_count must be at least 1, got {self.minimum_duplicate_count}"
            )

    def with_overrides(self, **changes: object) -> NormalizationPolicy:
        return replace(self, **changes)  # pyright: ignore[reportArgumentType]


NormalizationPolicy.DEFAULT = NormalizationPolicy()


def normalize_key(raw_key: str, policy: NormalizationPolicy = NormalizationPolicy.DEFAULT) -> str:
    normalized = raw_key
    if policy.trim_whitespace:
        normalized = normalized.strip()
    if not policy.case_sensitive:
        normalized = normalized.lower()
    return normalized
