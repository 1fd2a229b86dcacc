from __future__ import annotations

import pytest

from shelfsweep.domain.model import RecordKind, Tag
from shelfsweep.domain.reconciliation import (
    CleanupOutcome,
    DetectionResult,
    DiagnosticReport,
    FixOutcome,
    NormalizationPolicy,
)
from shelfsweep.ui import cli as cli_module


@pytest.fixture(autouse=True)
def clear_detection_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SHELFSWEEP_CASE_SENSITIVE",
        "SHELFSWEEP_TRIM_WHITESPACE",
        "SHELFSWEEP_IGNORE_EMPTY",
        "SHELFSWEEP_MIN_DUPLICATES",
    ):
        monkeypatch.delenv(name, raising=False)


def test_scan_uses_configured_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_scan(kind: RecordKind, **kwargs: object) -> DetectionResult[object]:
        captured["kind"] = kind
        captured.update(kwargs)
        return DetectionResult()

    monkeypatch.setattr(cli_module, "scan_duplicates", fake_scan)

    cli_module.main(["scan", "category"])

    assert captured["kind"] is RecordKind.CATEGORY
    assert captured["category_name"] is None
    assert captured["policy"] == NormalizationPolicy.DEFAULT


def test_scan_flags_override_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_scan(kind: RecordKind, **kwargs: object) -> DetectionResult[object]:
        captured["kind"] = kind
        captured.update(kwargs)
        return DetectionResult()

    monkeypatch.setattr(cli_module, "scan_duplicates", fake_scan)
    monkeypatch.setenv("SHELFSWEEP_MIN_DUPLICATES", "4")

    cli_module.main(
        [
            "scan",
            "product",
            "--category",
            "Audio",
            "--case-sensitive",
            "--no-trim-whitespace",
            "--min-duplicates",
            "3",
        ]
    )

    assert captured["category_name"] == "Audio"
    assert captured["policy"] == NormalizationPolicy(
        case_sensitive=True,
        trim_whitespace=False,
        minimum_duplicate_count=3,
    )


def test_scan_exits_when_store_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_scan(*_: object, **__: object) -> DetectionResult[object]:
        return DetectionResult.empty(diagnostic="Failed to fetch tag records: locked")

    monkeypatch.setattr(cli_module, "scan_duplicates", fake_scan)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["scan", "tag"])

    assert excinfo.value.code == 1


def test_invalid_threshold_is_a_validation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_scan(*_: object, **__: object) -> DetectionResult[object]:
        raise AssertionError("scan should not run")

    monkeypatch.setattr(cli_module, "scan_duplicates", fake_scan)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["scan", "tag", "--min-duplicates", "0"])

    assert excinfo.value.code == 2


def test_invalid_environment_is_a_validation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHELFSWEEP_CASE_SENSITIVE", "maybe")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["cleanup", "tag"])

    assert excinfo.value.code == 2


def test_unknown_kind_is_rejected() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["scan", "repair"])

    assert excinfo.value.code == 2


def test_cleanup_with_errors_exits_nonzero(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_cleanup(*_: object, **__: object) -> CleanupOutcome:
        return CleanupOutcome(cleaned=1, errors=("Failed to clean up duplicates 'x': boom",))

    monkeypatch.setattr(cli_module, "cleanup_duplicates", fake_cleanup)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["cleanup", "tag"])

    assert excinfo.value.code == 1


def test_successful_cleanup_returns_normally(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_cleanup(*_: object, **__: object) -> CleanupOutcome:
        return CleanupOutcome(cleaned=2)

    monkeypatch.setattr(cli_module, "cleanup_duplicates", fake_cleanup)

    cli_module.main(["cleanup", "category"])


def test_fatal_errors_exit_with_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_diagnose(**_: object) -> DiagnosticReport:
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(cli_module, "diagnose", fake_diagnose)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["diagnose"])

    assert excinfo.value.code == 1


def test_add_passes_category_and_tags(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_add(kind: RecordKind, name: str, **kwargs: object) -> Tag:
        captured.update(kwargs, kind=kind, name=name)
        return Tag(name=name)

    monkeypatch.setattr(cli_module, "add_record", fake_add)

    cli_module.main(
        ["add", "product", "Walkman", "--category", "Audio", "--tag", "a", "--tag", "b"]
    )

    assert captured == {
        "kind": RecordKind.PRODUCT,
        "name": "Walkman",
        "category_name": "Audio",
        "tag_names": ["a", "b"],
    }


def test_diagnose_exits_when_records_cannot_be_read(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_diagnose(**_: object) -> DiagnosticReport:
        return DiagnosticReport(diagnostics=("Failed to fetch records: locked",))

    monkeypatch.setattr(cli_module, "diagnose", fake_diagnose)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["diagnose"])

    assert excinfo.value.code == 1


def test_diagnose_with_issues_returns_normally(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_diagnose(**_: object) -> DiagnosticReport:
        return DiagnosticReport(orphaned_products=3)

    monkeypatch.setattr(cli_module, "diagnose", fake_diagnose)

    cli_module.main(["diagnose"])


def test_fix_passes_policy_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_fix(**kwargs: object) -> FixOutcome:
        captured.update(kwargs)
        return FixOutcome(duplicates_fixed=1, empty_labels_removed=2)

    monkeypatch.setattr(cli_module, "fix_catalog_issues", fake_fix)

    cli_module.main(["fix", "--no-ignore-empty"])

    assert captured["policy"] == NormalizationPolicy(ignore_empty=False)


def test_fix_with_errors_exits_nonzero(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_fix(**_: object) -> FixOutcome:
        return FixOutcome(errors=("Failed to save cleanup results: disk full",))

    monkeypatch.setattr(cli_module, "fix_catalog_issues", fake_fix)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["fix"])

    assert excinfo.value.code == 1


def test_ignore_empty_flag_overrides_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_scan(kind: RecordKind, **kwargs: object) -> DetectionResult[object]:
        captured.update(kwargs, kind=kind)
        return DetectionResult()

    monkeypatch.setattr(cli_module, "scan_duplicates", fake_scan)
    monkeypatch.setenv("SHELFSWEEP_IGNORE_EMPTY", "false")

    cli_module.main(["scan", "tag", "--ignore-empty"])

    assert captured["policy"] == NormalizationPolicy(ignore_empty=True)


def test_unknown_log_level_is_a_validation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHELFSWEEP_LOG_LEVEL", "chatty")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["diagnose"])

    assert excinfo.value.code == 2
