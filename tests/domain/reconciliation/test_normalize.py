from __future__ import annotations

import pytest

from shelfsweep.domain.reconciliation import NormalizationPolicy, normalize_key


def test_default_policy_trims_and_lowercases() -> None:
    assert normalize_key("  Apple Watch \n") == "apple watch"


def test_case_sensitive_policy_keeps_case() -> None:
    policy = NormalizationPolicy(case_sensitive=True)

    assert normalize_key(" Apple ", policy) == "Apple"


def test_untrimmed_policy_keeps_outer_whitespace() -> None:
    policy = NormalizationPolicy(trim_whitespace=False)

    assert normalize_key(" Apple ", policy) == " apple "


def test_internal_whitespace_and_punctuation_are_untouched() -> None:
    assert normalize_key("Sony  WH-1000XM4!") == "sony  wh-1000xm4!"


def test_unicode_forms_are_not_folded() -> None:
    composed = "Café"
    decomposed = "Café"

    assert normalize_key(composed) != normalize_key(decomposed)


def test_policy_rejects_non_positive_threshold() -> None:
    with pytest.raises(ValueError, match="minimum_duplicate_count"):
        NormalizationPolicy(minimum_duplicate_count=0)


def test_with_overrides_returns_adjusted_copy() -> None:
    policy = NormalizationPolicy.DEFAULT.with_overrides(minimum_duplicate_count=3)

    assert policy.minimum_duplicate_count == 3
    assert policy.case_sensitive is False
    assert NormalizationPolicy.DEFAULT.minimum_duplicate_count == 2
