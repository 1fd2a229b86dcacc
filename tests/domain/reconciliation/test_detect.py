from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest

from shelfsweep.domain.reconciliation import (
    DetectionResult,
    DuplicateGroup,
    NormalizationPolicy,
    detect_duplicates,
)


@dataclass(eq=False)
class Item:
    key: str | None


def _key(item: Item) -> str | None:
    return item.key


def test_case_and_whitespace_variants_form_one_group() -> None:
    items = [Item("Apple "), Item("apple"), Item("APPLE")]
    policy = NormalizationPolicy(case_sensitive=False, trim_whitespace=True)

    result = detect_duplicates(items, _key, policy)

    assert len(result.duplicates) == 1
    group = result.duplicates[0]
    assert group.key == "apple"
    assert group.count == 3
    assert group.items == tuple(items)
    assert result.total_count == 3
    assert result.duplicate_count == 3


def test_strict_policy_keeps_variants_apart() -> None:
    items = [Item("Apple "), Item("apple"), Item("APPLE")]
    policy = NormalizationPolicy(case_sensitive=True, trim_whitespace=False)

    result = detect_duplicates(items, _key, policy)

    assert result.duplicates == ()
    assert result.total_count == 3
    assert result.duplicate_count == 0


def test_empty_and_missing_keys_are_excluded() -> None:
    items = [Item(""), Item("  "), Item(None)]

    result = detect_duplicates(items, _key, NormalizationPolicy(ignore_empty=True))

    assert result.total_count == 0
    assert result.duplicates == ()
    assert result.excluded_count == 3


def test_empty_keys_group_when_not_ignored() -> None:
    items = [Item(""), Item("  "), Item(None)]

    result = detect_duplicates(items, _key, NormalizationPolicy(ignore_empty=False))

    assert result.total_count == 2
    assert result.keys == ("",)
    assert result.excluded_count == 1


def test_threshold_boundary() -> None:
    pair = [Item("lamp"), Item("Lamp")]
    triple = [Item("desk"), Item("DESK"), Item(" desk")]
    policy = NormalizationPolicy(minimum_duplicate_count=3)

    result = detect_duplicates([*pair, *triple], _key, policy)

    assert result.keys == ("desk",)
    assert result.total_count == 5
    assert result.duplicate_count == 3


def test_groups_keep_first_seen_order() -> None:
    first_tv, first_radio, second_tv, second_radio, third_tv = (
        Item("TV"),
        Item("Radio"),
        Item("tv"),
        Item("radio"),
        Item(" Tv "),
    )

    result = detect_duplicates(
        [first_tv, first_radio, second_tv, second_radio, third_tv],
        _key,
    )

    assert result.keys == ("tv", "radio")
    assert result.duplicates[0].items == (first_tv, second_tv, third_tv)
    assert result.duplicates[0].survivor is first_tv
    assert result.duplicates[0].redundant == (second_tv, third_tv)
    assert result.duplicates[1].items == (first_radio, second_radio)


def test_singletons_count_towards_total_only() -> None:
    result = detect_duplicates([Item("a"), Item("b"), Item("A")], _key)

    assert result.total_count == 3
    assert result.duplicate_count == 2
    assert result.duplicate_count <= result.total_count


def test_exclusions_are_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="shelfsweep.domain.reconciliation.detect")

    detect_duplicates([Item(None), Item("x")], _key)

    assert "Excluded 1 records without a usable key" in caplog.text


def test_summary_strings() -> None:
    empty = detect_duplicates([Item("a")], _key)
    found = detect_duplicates([Item("a"), Item("A"), Item("b"), Item("B"), Item("B ")], _key)

    assert empty.summary == "No duplicates found"
    assert not empty.has_duplicates
    assert found.summary == "Found 5 duplicates across 2 groups"
    assert found.has_duplicates


def test_detection_result_rejects_inconsistent_counts() -> None:
    with pytest.raises(ValueError, match="exceeds"):
        DetectionResult[Item](total_count=1, duplicate_count=2)


def test_duplicate_group_requires_members() -> None:
    with pytest.raises(ValueError, match="at least one item"):
        DuplicateGroup[Item](key="empty", items=())


def test_empty_result_carries_diagnostic() -> None:
    result = DetectionResult[Item].empty(diagnostic="store offline")

    assert result.duplicates == ()
    assert result.total_count == 0
    assert result.diagnostic == "store offline"
    assert result.summary == "No duplicates found"
