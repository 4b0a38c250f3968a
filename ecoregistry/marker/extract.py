"""Turn a parsed marker config into normalised ecosystem metadata.

All coercions here are total: unknown or malformed values never raise, they
collapse to ``False``, :attr:`Language.UNRECOGNISED`, or a default, and the
caller decides what that means. :func:`extract_metadata` returns ``None``
for any repository that should be left out of the registry.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from .parser import RawConfig, RawValue

DEFAULT_RELEASE_TAG = "eco-atlas"
DEFAULT_ASSET_NAME = "atlas-pack.tgz"

TRUTHY_VALUES = frozenset({"true", "1", "yes", "on"})


class Language(enum.StrEnum):
    """Canonical ecosystem languages."""

    PYTHON = "Python"
    R = "R"
    UNRECOGNISED = ""


_LANGUAGE_ALIASES: dict[str, Language] = {
    "python": Language.PYTHON,
    "py": Language.PYTHON,
    "r": Language.R,
}


def coerce_flag(value: RawValue | None) -> bool:
    """Return True only for a scalar in :data:`TRUTHY_VALUES`."""
    if not isinstance(value, str):
        return False
    return value.strip().lower() in TRUTHY_VALUES


def normalize_language(value: RawValue | None) -> Language:
    """Map a raw language name onto :class:`Language`."""
    if not isinstance(value, str):
        return Language.UNRECOGNISED
    return _LANGUAGE_ALIASES.get(value.strip().lower(), Language.UNRECOGNISED)


def coerce_list(value: RawValue | None) -> list[str]:
    """Return trimmed, non-empty strings from a list or a single scalar."""
    if value is None:
        return []
    items = value if isinstance(value, list) else [value]
    return [item.strip() for item in items if item.strip()]


def coerce_text(value: RawValue | None) -> str | None:
    """Return a trimmed scalar, or ``None`` for lists and blank strings."""
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


@dataclasses.dataclass(frozen=True, slots=True)
class EcosystemMetadata:
    """Accepted marker contents, ready to become a registry entry."""

    package: str
    language: Language
    release_tag: str
    asset: str
    role: str | None
    tags: tuple[str, ...]
    entrypoints: tuple[str, ...]


@dataclasses.dataclass(frozen=True, slots=True)
class ExtractionDefaults:
    """Fallbacks applied when a marker omits the release fields."""

    release_tag: str = DEFAULT_RELEASE_TAG
    asset: str = DEFAULT_ASSET_NAME


def extract_metadata(
    config: RawConfig,
    *,
    repo_name: str,
    defaults: ExtractionDefaults | None = None,
) -> EcosystemMetadata | None:
    """Validate ``config`` and return normalised metadata.

    Parameters
    ----------
    config
        Parsed marker file contents.
    repo_name
        Short repository name, used when ``package`` is absent.
    defaults
        Release tag and asset name fallbacks.

    Returns
    -------
    EcosystemMetadata | None
        ``None`` unless ``ecosystem`` is truthy and ``language`` is
        recognised.

    """
    if not coerce_flag(config.get("ecosystem")):
        return None
    language = normalize_language(config.get("language"))
    if language is Language.UNRECOGNISED:
        return None

    fallback = defaults or ExtractionDefaults()
    return EcosystemMetadata(
        package=coerce_text(config.get("package")) or repo_name,
        language=language,
        release_tag=coerce_text(config.get("release_tag")) or fallback.release_tag,
        asset=coerce_text(config.get("asset")) or fallback.asset,
        role=coerce_text(config.get("role")),
        tags=tuple(_unique(coerce_list(config.get("tags")))),
        entrypoints=tuple(coerce_list(config.get("entrypoints"))),
    )
