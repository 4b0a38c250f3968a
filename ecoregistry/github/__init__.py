"""GitHub REST client and release asset helpers used by discovery."""

from __future__ import annotations

from .assets import (
    AssetResolution,
    check_asset_reachable,
    find_asset_url,
    resolve_asset,
    resolve_asset_url,
)
from .client import (
    GitHubRepositoryClient,
    GitHubRestClient,
    GitHubRestConfig,
    parse_owner_kind,
)
from .errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
    OwnerResolutionError,
)
from .models import OwnerKind, RemoteRepository

__all__ = [
    "AssetResolution",
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubRepositoryClient",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "GitHubRestConfig",
    "OwnerKind",
    "OwnerResolutionError",
    "RemoteRepository",
    "check_asset_reachable",
    "find_asset_url",
    "parse_owner_kind",
    "resolve_asset",
    "resolve_asset_url",
]
