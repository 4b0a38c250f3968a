"""Release asset resolution and reachability checks."""

from __future__ import annotations

import dataclasses
import typing as typ

import httpx

from ecoregistry.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    from .client import GitHubRepositoryClient
    from .models import RemoteRepository

logger = get_logger(__name__)

_HTTP_SUCCESS = range(200, 300)
_HTTP_FOUND = 302


def is_reachable_status(status_code: int) -> bool:
    """Return True for 2xx responses and for a bare 302 redirect."""
    return status_code in _HTTP_SUCCESS or status_code == _HTTP_FOUND


def find_asset_url(release: dict[str, typ.Any], asset_name: str) -> str | None:
    """Return the download URL of the asset named exactly ``asset_name``."""
    assets = release.get("assets") or []
    if not isinstance(assets, list):
        return None
    for asset in assets:
        if not isinstance(asset, dict) or asset.get("name") != asset_name:
            continue
        url = asset.get("browser_download_url")
        return url if isinstance(url, str) and url else None
    return None


@dataclasses.dataclass(frozen=True, slots=True)
class AssetResolution:
    """Outcome of resolving one repository's atlas asset."""

    url: str | None
    reachable: bool

    @property
    def retained_url(self) -> str:
        """URL to store in the registry; empty unless it was reachable."""
        return self.url if self.url and self.reachable else ""

    @property
    def unreachable(self) -> bool:
        """True when a URL resolved but failed the reachability check."""
        return self.url is not None and not self.reachable


async def resolve_asset_url(
    client: GitHubRepositoryClient,
    repo: RemoteRepository,
    *,
    release_tag: str,
    asset_name: str,
) -> str | None:
    """Look up ``release_tag`` and return the matching asset URL, if any."""
    release = await client.get_release_by_tag(repo, release_tag)
    if release is None:
        return None
    return find_asset_url(release, asset_name)


async def check_asset_reachable(client: GitHubRepositoryClient, url: str | None) -> bool:
    """Return True when ``HEAD url`` answers 2xx or 302.

    Transport failures count as unreachable rather than as errors.
    """
    if not url:
        return False
    try:
        status_code = await client.head_status(url)
    except httpx.HTTPError as exc:
        log_debug(logger, "HEAD %s failed: %s", url, exc)
        return False
    return is_reachable_status(status_code)


async def resolve_asset(
    client: GitHubRepositoryClient,
    repo: RemoteRepository,
    *,
    release_tag: str,
    asset_name: str,
) -> AssetResolution:
    """Resolve the asset URL for ``repo`` and check that it is reachable."""
    url = await resolve_asset_url(
        client, repo, release_tag=release_tag, asset_name=asset_name
    )
    reachable = await check_asset_reachable(client, url)
    return AssetResolution(url=url, reachable=reachable)
