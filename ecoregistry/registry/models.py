"""Typed registry structures."""

from __future__ import annotations

import dataclasses
import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    import datetime as dt

    from ecoregistry.marker import EcosystemMetadata

type RegistryRecord = dict[str, typ.Any]


def format_timestamp(moment: dt.datetime) -> str:
    """Render a UTC timestamp as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RegistryEntry(msgspec.Struct, kw_only=True):
    """One participating repository in ``registry.json``.

    Attributes
    ----------
    repo : str
        ``owner/name`` slug; unique within the registry.
    package : str
        Package name, defaulting to the repository name.
    language : str
        Canonical language, ``Python`` or ``R``.
    release_tag : str
        Tag of the release carrying the atlas asset.
    asset : str
        File name of the atlas asset.
    atlas_asset_url : str
        Download URL of the asset, or ``""`` when missing or unreachable.
    role : str, optional
        Free-form role of the package in the ecosystem.
    tags : list[str]
        Distinct tags in declaration order.
    entrypoints : list[str]
        Entrypoints in declaration order.
    last_updated : str
        UTC timestamp of the scan that produced this entry.

    """

    repo: str
    package: str
    language: str
    release_tag: str
    asset: str
    atlas_asset_url: str = ""
    role: str | None = None
    tags: list[str] = msgspec.field(default_factory=list)
    entrypoints: list[str] = msgspec.field(default_factory=list)
    last_updated: str

    @classmethod
    def from_metadata(
        cls,
        slug: str,
        metadata: EcosystemMetadata,
        *,
        atlas_asset_url: str,
        scanned_at: dt.datetime,
    ) -> RegistryEntry:
        """Build an entry from accepted marker metadata."""
        return cls(
            repo=slug,
            package=metadata.package,
            language=str(metadata.language),
            release_tag=metadata.release_tag,
            asset=metadata.asset,
            atlas_asset_url=atlas_asset_url,
            role=metadata.role,
            tags=list(metadata.tags),
            entrypoints=list(metadata.entrypoints),
            last_updated=format_timestamp(scanned_at),
        )

    def to_record(self) -> RegistryRecord:
        """Return the JSON-ready mapping written to the registry file."""
        return msgspec.to_builtins(self)


@dataclasses.dataclass(slots=True)
class ReconcileResult:
    """Entries and counters produced by one reconciliation pass.

    ``unchanged`` counts repositories that were already registered, whether
    or not their metadata changed. ``preserved`` counts previous entries
    carried forward because their repository was not listed this run.
    """

    entries: list[RegistryRecord] = dataclasses.field(default_factory=list)
    added: int = 0
    unchanged: int = 0
    failed: int = 0
    preserved: int = 0

    @property
    def total(self) -> int:
        """Return the number of entries that will be written."""
        return len(self.entries)
