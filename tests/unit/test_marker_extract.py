"""Unit tests for marker metadata extraction."""

from __future__ import annotations

import pytest

from ecoregistry.marker import (
    DEFAULT_ASSET_NAME,
    DEFAULT_RELEASE_TAG,
    ExtractionDefaults,
    Language,
    coerce_flag,
    coerce_list,
    extract_metadata,
    normalize_language,
    parse_marker,
)


def test_python_marker_yields_expected_metadata() -> None:
    """The canonical python example extracts package, language, and tags."""
    config = parse_marker(
        "ecosystem: true\nlanguage: python\npackage: foo\ntags:\n  - ml\n  - infra"
    )

    metadata = extract_metadata(config, repo_name="foo-repo")

    assert metadata is not None
    assert metadata.language is Language.PYTHON
    assert str(metadata.language) == "Python"
    assert metadata.package == "foo"
    assert metadata.tags == ("ml", "infra")
    assert metadata.entrypoints == ()
    assert metadata.role is None
    assert metadata.release_tag == DEFAULT_RELEASE_TAG
    assert metadata.asset == DEFAULT_ASSET_NAME


def test_disabled_marker_is_rejected() -> None:
    """``ecosystem: false`` produces no metadata."""
    config = parse_marker("ecosystem: false\nlanguage: r")
    assert extract_metadata(config, repo_name="x") is None


@pytest.mark.parametrize("language", ["go", "", "[r]"])
def test_unrecognised_language_is_rejected(language: str) -> None:
    """A language outside the fixed mapping rejects the marker."""
    config = parse_marker(f"ecosystem: yes\nlanguage: {language}\n")
    assert extract_metadata(config, repo_name="x") is None


def test_missing_language_is_rejected() -> None:
    """A marker without a language key is rejected."""
    assert extract_metadata({"ecosystem": "true"}, repo_name="x") is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("true", True),
        ("TRUE", True),
        (" Yes ", True),
        ("1", True),
        ("on", True),
        ("false", False),
        ("0", False),
        ("enabled", False),
        (["true"], False),
        (None, False),
    ],
)
def test_coerce_flag(value: str | list[str] | None, *, expected: bool) -> None:
    """Only the truthy set enables participation."""
    assert coerce_flag(value) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("python", Language.PYTHON),
        ("Py", Language.PYTHON),
        ("R", Language.R),
        (" r ", Language.R),
        ("julia", Language.UNRECOGNISED),
        (["python"], Language.UNRECOGNISED),
        (None, Language.UNRECOGNISED),
    ],
)
def test_normalize_language(
    value: str | list[str] | None, expected: Language
) -> None:
    """Language aliases map onto the canonical enumeration."""
    assert normalize_language(value) is expected


def test_coerce_list_wraps_scalars_and_drops_blanks() -> None:
    """Scalars become one-element lists; blank items are dropped."""
    assert coerce_list("solo") == ["solo"]
    assert coerce_list(["a ", "", "  ", "b"]) == ["a", "b"]
    assert coerce_list("   ") == []
    assert coerce_list(None) == []


def test_defaults_and_fallbacks() -> None:
    """Package falls back to the repo name; release fields to the defaults."""
    config = parse_marker(
        "ecosystem: 1\nlanguage: r\nrole: 'model'\ntags: [b, a, b]\nentrypoints: run"
    )

    metadata = extract_metadata(
        config,
        repo_name="atlas-r",
        defaults=ExtractionDefaults(release_tag="atlas", asset="pack.tgz"),
    )

    assert metadata is not None
    assert metadata.package == "atlas-r"
    assert metadata.language is Language.R
    assert metadata.release_tag == "atlas"
    assert metadata.asset == "pack.tgz"
    assert metadata.role == "model"
    assert metadata.tags == ("b", "a")
    assert metadata.entrypoints == ("run",)


def test_marker_release_fields_override_defaults() -> None:
    """Markers can name their own release tag and asset."""
    config = parse_marker(
        "ecosystem: on\nlanguage: py\nrelease_tag: v2-atlas\nasset: custom.tgz\n"
    )

    metadata = extract_metadata(config, repo_name="x")

    assert metadata is not None
    assert (metadata.release_tag, metadata.asset) == ("v2-atlas", "custom.tgz")
