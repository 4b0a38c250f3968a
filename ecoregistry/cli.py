"""Command-line entrypoint for registry discovery.

Usage:
    ecoregistry discover                 # Sync registry.json with the owner
    ecoregistry discover --dry-run       # Scan without writing the registry
    ecoregistry check-marker PATH        # Validate a local .ecosystem.yml

Every ``discover`` option falls back to an environment variable so the
command can run unchanged from a scheduled CI job; see
:mod:`ecoregistry.discovery` for the full list.
"""

from __future__ import annotations

import asyncio
import sys
import typing as typ
from pathlib import Path

import httpx
import msgspec
from cyclopts import App, Parameter

from ecoregistry.common.slug import parse_repo_slug
from ecoregistry.discovery import DiscoverySettings, run_discovery
from ecoregistry.github import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
    OwnerResolutionError,
)
from ecoregistry.github.client import DEFAULT_API_URL
from ecoregistry.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_exception,
    log_warning,
)
from ecoregistry.marker import (
    DEFAULT_ASSET_NAME,
    DEFAULT_MARKER_PATH,
    DEFAULT_RELEASE_TAG,
    ExtractionDefaults,
    extract_metadata,
    parse_marker,
)
from ecoregistry.registry import DEFAULT_REGISTRY_PATH, RegistryLoadError

logger = get_logger(__name__)

app = App(
    name="ecoregistry",
    help="Maintain the ecosystem registry from .ecosystem.yml marker files",
    version="0.1.0",
)

_FATAL_ERRORS = (
    GitHubConfigError,
    OwnerResolutionError,
    RegistryLoadError,
    GitHubAPIError,
    GitHubResponseShapeError,
    httpx.HTTPError,
    OSError,
)


def _setup_logging(level: str) -> None:
    normalized, invalid = configure_logging(level)
    if invalid:
        log_warning(
            logger,
            "Invalid ECOREGISTRY_LOG_LEVEL %r, falling back to %s",
            level,
            normalized,
        )


@app.command
def discover(  # noqa: PLR0913 - one option per setting
    *,
    token: typ.Annotated[str, Parameter(env_var="GH_TOKEN", show_default=False)] = "",
    owner: typ.Annotated[str, Parameter(env_var=["GH_ORG", "GH_OWNER"])] = "",
    owner_type: typ.Annotated[
        str | None, Parameter(env_var="GH_OWNER_TYPE")
    ] = None,
    registry: typ.Annotated[
        Path, Parameter(env_var="ECOREGISTRY_REGISTRY")
    ] = DEFAULT_REGISTRY_PATH,
    marker: typ.Annotated[
        str, Parameter(env_var="ECOREGISTRY_MARKER")
    ] = DEFAULT_MARKER_PATH,
    release_tag: typ.Annotated[
        str, Parameter(env_var="ECOREGISTRY_RELEASE_TAG")
    ] = DEFAULT_RELEASE_TAG,
    asset: typ.Annotated[
        str, Parameter(env_var="ECOREGISTRY_ASSET")
    ] = DEFAULT_ASSET_NAME,
    api_url: typ.Annotated[
        str, Parameter(env_var="ECOREGISTRY_API_URL")
    ] = DEFAULT_API_URL,
    log_level: typ.Annotated[
        str, Parameter(env_var="ECOREGISTRY_LOG_LEVEL")
    ] = "INFO",
    dry_run: bool = False,
) -> int:
    """Scan the owner's repositories and update the registry file.

    Args:
        token: GitHub bearer token.
        owner: Organisation or user whose repositories are scanned.
        owner_type: ``org`` or ``user``; auto-detected when omitted.
        registry: Registry JSON file read at start and replaced at the end.
        marker: Marker file path inside each repository.
        release_tag: Release tag used when a marker does not set one.
        asset: Asset name used when a marker does not set one.
        api_url: GitHub REST API base URL.
        log_level: femtologging level.
        dry_run: Scan and report without writing the registry.

    Returns:
        Exit code: 0 for a completed run, 1 for a fatal error.

    """
    _setup_logging(log_level)
    try:
        settings = DiscoverySettings(
            token=token,
            owner=owner,
            owner_kind=owner_type,
            registry_path=registry,
            marker_path=marker,
            release_tag=release_tag,
            asset_name=asset,
            api_url=api_url,
            dry_run=dry_run,
        )
    except GitHubConfigError as exc:
        log_error(logger, "%s", exc)
        return 1

    try:
        result = asyncio.run(run_discovery(settings))
    except _FATAL_ERRORS as exc:
        log_exception(logger, f"Discovery failed for {settings.owner}: {exc}", exc)
        return 1

    print(
        f"{result.total} total entries (+{result.added} new, "
        f"{result.unchanged} unchanged, {result.failed} errors, "
        f"{result.preserved} kept from missing repos)",
        file=sys.stderr,
    )
    return 0


@app.command(name="check-marker")
def check_marker(
    path: Path,
    *,
    repo: str | None = None,
    release_tag: str = DEFAULT_RELEASE_TAG,
    asset: str = DEFAULT_ASSET_NAME,
) -> int:
    """Validate a local marker file and print the metadata it yields.

    Args:
        path: Marker file to check.
        repo: ``owner/name`` the marker belongs to; defaults to the name of
            the directory holding the marker.
        release_tag: Release tag used when the marker does not set one.
        asset: Asset name used when the marker does not set one.

    Returns:
        Exit code: 0 when the marker is accepted, 1 otherwise.

    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Cannot read {path}: {exc}", file=sys.stderr)
        return 1

    try:
        repo_name = parse_repo_slug(repo)[1] if repo else path.resolve().parent.name
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    metadata = extract_metadata(
        parse_marker(text),
        repo_name=repo_name,
        defaults=ExtractionDefaults(release_tag=release_tag, asset=asset),
    )
    if metadata is None:
        print(
            f"{path} is skipped: ecosystem must be true and language recognised",
            file=sys.stderr,
        )
        return 1

    sys.stdout.write(msgspec.json.format(msgspec.json.encode(metadata)).decode())
    sys.stdout.write("\n")
    return 0


def main() -> int:
    """Entry point for the ``ecoregistry`` console script."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
