"""Detection policy defaults, overridable through the environment."""

from __future__ import annotations

from dataclasses import dataclass

from shelfsweep.domain.reconciliation.normalize import NormalizationPolicy

from .env import env_flag, env_int
from .errors import ConfigurationError

DEFAULT_MINIMUM_DUPLICATE_COUNT = 2


@dataclass(frozen=True, slots=True)
class DetectionConfig:
    case_sensitive: bool = False
    trim_whitespace: bool = True
    ignore_empty: bool = True
    minimum_duplicate_count: int = DEFAULT_MINIMUM_DUPLICATE_COUNT

    def to_policy(self) -> NormalizationPolicy:
        try:
            return NormalizationPolicy(
                case_sensitive=self.case_sensitive,
                trim_whitespace=self.trim_whitespace,
                ignore_empty=self.ignore_empty,
                minimum_duplicate_count=self.minimum_duplicate_count,
            )
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc


def get_detection_config() -> DetectionConfig:
    return DetectionConfig(
        case_sensitive=env_flag("SHELFSWEEP_CASE_SENSITIVE", default=False),
        trim_whitespace=env_flag("SHELFSWEEP_TRIM_WHITESPACE", default=True),
        ignore_empty=env_flag("SHELFSWEEP_IGNORE_EMPTY", default=True),
        minimum_duplicate_count=env_int(
            "SHELFSWEEP_MIN_DUPLICATES", default=DEFAULT_MINIMUM_DUPLICATE_COUNT
        ),
    )
