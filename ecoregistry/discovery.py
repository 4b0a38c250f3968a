"""End-to-end registry discovery for one GitHub owner.

A run resolves whether the owner is an organisation or a user, loads the
previous registry, lists the owner's repositories, reconciles them one at a
time, and writes the sorted registry back in a single atomic replace.

Configuration is read from the environment by
:meth:`DiscoverySettings.from_env`:

- ``GH_TOKEN``: GitHub bearer token (required)
- ``GH_ORG`` or ``GH_OWNER``: organisation or user to scan (required)
- ``GH_OWNER_TYPE``: ``org`` or ``user`` to skip auto-detection
- ``ECOREGISTRY_REGISTRY``: registry path (default ``registry.json``)
- ``ECOREGISTRY_MARKER``: marker path (default ``.ecosystem.yml``)
- ``ECOREGISTRY_RELEASE_TAG``: default release tag (default ``eco-atlas``)
- ``ECOREGISTRY_ASSET``: default asset name (default ``atlas-pack.tgz``)
- ``ECOREGISTRY_API_URL``: API base URL (default ``https://api.github.com``)
"""

from __future__ import annotations

import asyncio
import dataclasses
import os
from pathlib import Path

from ecoregistry.github import (
    GitHubConfigError,
    GitHubRepositoryClient,
    GitHubRestClient,
    GitHubRestConfig,
    parse_owner_kind,
)
from ecoregistry.github.client import DEFAULT_API_URL
from ecoregistry.marker import (
    DEFAULT_ASSET_NAME,
    DEFAULT_MARKER_PATH,
    DEFAULT_RELEASE_TAG,
    ExtractionDefaults,
)
from ecoregistry.observability import DiscoveryEventLogger
from ecoregistry.registry import (
    DEFAULT_REGISTRY_PATH,
    ReconcileResult,
    RepositoryScanner,
    ScanConfig,
    load_registry,
    reconcile_registry,
    write_registry,
)


def _env(name: str, *fallbacks: str) -> str:
    for key in (name, *fallbacks):
        value = os.environ.get(key, "").strip()
        if value:
            return value
    return ""


@dataclasses.dataclass(frozen=True, slots=True)
class DiscoverySettings:
    """Inputs for a single discovery run."""

    token: str
    owner: str
    owner_kind: str | None = None
    registry_path: Path = DEFAULT_REGISTRY_PATH
    marker_path: str = DEFAULT_MARKER_PATH
    release_tag: str = DEFAULT_RELEASE_TAG
    asset_name: str = DEFAULT_ASSET_NAME
    api_url: str = DEFAULT_API_URL
    dry_run: bool = False

    def __post_init__(self) -> None:
        """Reject missing credentials and owners before any network call."""
        if not self.token.strip():
            raise GitHubConfigError.missing_token()
        if not self.owner.strip():
            raise GitHubConfigError.missing_owner()
        parse_owner_kind(self.owner_kind)

    @classmethod
    def from_env(cls) -> DiscoverySettings:
        """Build settings from environment variables."""
        return cls(
            token=_env("GH_TOKEN"),
            owner=_env("GH_ORG", "GH_OWNER"),
            owner_kind=_env("GH_OWNER_TYPE") or None,
            registry_path=Path(_env("ECOREGISTRY_REGISTRY") or DEFAULT_REGISTRY_PATH),
            marker_path=_env("ECOREGISTRY_MARKER") or DEFAULT_MARKER_PATH,
            release_tag=_env("ECOREGISTRY_RELEASE_TAG") or DEFAULT_RELEASE_TAG,
            asset_name=_env("ECOREGISTRY_ASSET") or DEFAULT_ASSET_NAME,
            api_url=_env("ECOREGISTRY_API_URL") or DEFAULT_API_URL,
        )

    def client_config(self) -> GitHubRestConfig:
        """Return the REST client configuration for these settings."""
        return GitHubRestConfig(token=self.token, api_url=self.api_url)

    def scan_config(self) -> ScanConfig:
        """Return the per-repository scan configuration."""
        return ScanConfig(
            marker_path=self.marker_path,
            defaults=ExtractionDefaults(
                release_tag=self.release_tag, asset=self.asset_name
            ),
        )


async def discover(
    settings: DiscoverySettings,
    client: GitHubRepositoryClient,
    *,
    events: DiscoveryEventLogger | None = None,
) -> ReconcileResult:
    """Run one discovery pass and persist the registry unless ``dry_run``.

    Raises
    ------
    GitHubConfigError
        If the owner kind override is invalid.
    OwnerResolutionError
        If the owner is neither an organisation nor a user.
    RegistryLoadError
        If the previous registry cannot be read.
    GitHubAPIError
        If the repository listing fails.

    """
    event_logger = events or DiscoveryEventLogger()
    kind = await client.resolve_owner_kind(
        settings.owner, override=settings.owner_kind
    )
    event_logger.log_run_started(owner=settings.owner, owner_kind=kind)

    existing = await asyncio.to_thread(load_registry, settings.registry_path)
    repositories = [
        repo async for repo in client.iter_repositories(settings.owner, kind)
    ]
    event_logger.log_repositories_listed(
        owner=settings.owner, count=len(repositories)
    )

    scanner = RepositoryScanner(client, settings.scan_config(), events=event_logger)
    result = await reconcile_registry(
        existing, repositories, scanner.scan, events=event_logger
    )

    if not settings.dry_run:
        await asyncio.to_thread(write_registry, settings.registry_path, result.entries)
    event_logger.log_run_completed(owner=settings.owner, result=result)
    return result


async def run_discovery(settings: DiscoverySettings) -> ReconcileResult:
    """Run :func:`discover` with a REST client that is closed afterwards."""
    async with GitHubRestClient(settings.client_config()) as client:
        return await discover(settings, client)
