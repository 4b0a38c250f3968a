"""Marker file parsing and metadata extraction.

Quick example::

    >>> from ecoregistry.marker import extract_metadata, parse_marker
    >>> config = parse_marker("ecosystem: yes\\nlanguage: py\\n")
    >>> extract_metadata(config, repo_name="atlas").package
    'atlas'

"""

from __future__ import annotations

from .extract import (
    DEFAULT_ASSET_NAME,
    DEFAULT_RELEASE_TAG,
    EcosystemMetadata,
    ExtractionDefaults,
    Language,
    coerce_flag,
    coerce_list,
    extract_metadata,
    normalize_language,
)
from .parser import MarkerParser, ParserState, RawConfig, classify_line, parse_marker

DEFAULT_MARKER_PATH = ".ecosystem.yml"

__all__ = [
    "DEFAULT_ASSET_NAME",
    "DEFAULT_MARKER_PATH",
    "DEFAULT_RELEASE_TAG",
    "EcosystemMetadata",
    "ExtractionDefaults",
    "Language",
    "MarkerParser",
    "ParserState",
    "RawConfig",
    "classify_line",
    "coerce_flag",
    "coerce_list",
    "extract_metadata",
    "normalize_language",
    "parse_marker",
]
