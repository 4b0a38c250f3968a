"""Scan one repository and build its registry entry."""

from __future__ import annotations

import dataclasses
import typing as typ

from ecoregistry.common.time import utcnow
from ecoregistry.github.assets import resolve_asset
from ecoregistry.logging import get_logger, log_debug
from ecoregistry.marker import (
    DEFAULT_MARKER_PATH,
    ExtractionDefaults,
    extract_metadata,
    parse_marker,
)
from ecoregistry.observability import DiscoveryEventLogger

from .models import RegistryEntry

if typ.TYPE_CHECKING:
    import datetime as dt

    from ecoregistry.github.client import GitHubRepositoryClient
    from ecoregistry.github.models import RemoteRepository

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class ScanConfig:
    """Runtime knobs for repository scans."""

    marker_path: str = DEFAULT_MARKER_PATH
    defaults: ExtractionDefaults = dataclasses.field(
        default_factory=ExtractionDefaults
    )
    clock: typ.Callable[[], dt.datetime] = utcnow


class RepositoryScanner:
    """Fetch, parse, and resolve a single repository's marker.

    Exceptions from the GitHub client propagate so the reconciler can count
    the repository as failed. A missing or rejected marker yields ``None``.
    """

    def __init__(
        self,
        client: GitHubRepositoryClient,
        config: ScanConfig | None = None,
        *,
        events: DiscoveryEventLogger | None = None,
    ) -> None:
        """Bind the scanner to a GitHub client."""
        self._client = client
        self._config = config or ScanConfig()
        self._events = events or DiscoveryEventLogger()

    async def scan(self, repo: RemoteRepository) -> RegistryEntry | None:
        """Return the registry entry for ``repo``, or ``None`` to skip it."""
        text = await self._client.get_file_text(repo, self._config.marker_path)
        if text is None:
            log_debug(logger, "%s has no %s", repo.slug, self._config.marker_path)
            return None

        metadata = extract_metadata(
            parse_marker(text), repo_name=repo.name, defaults=self._config.defaults
        )
        if metadata is None:
            log_debug(logger, "%s is not an ecosystem participant", repo.slug)
            return None

        asset = await resolve_asset(
            self._client,
            repo,
            release_tag=metadata.release_tag,
            asset_name=metadata.asset,
        )
        if asset.unreachable and asset.url is not None:
            self._events.log_asset_unreachable(repo_slug=repo.slug, url=asset.url)

        return RegistryEntry.from_metadata(
            repo.slug,
            metadata,
            atlas_asset_url=asset.retained_url,
            scanned_at=self._config.clock(),
        )
