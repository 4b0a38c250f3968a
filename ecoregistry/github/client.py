"""GitHub REST client used by registry discovery.

Only the handful of endpoints discovery needs are wrapped: owner lookups,
paginated repository listing, file contents, releases by tag, and a bare
``HEAD`` for asset reachability. JSON lookups that answer 404 return
``None``; every other error status raises :class:`GitHubAPIError`.
"""

from __future__ import annotations

import base64
import collections.abc as cabc
import dataclasses
import os
import typing as typ
import urllib.parse

import httpx

from .errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
    OwnerResolutionError,
)
from .models import OwnerKind, RemoteRepository

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
PAGE_SIZE = 100

_HTTP_NOT_FOUND = 404
_HTTP_ERROR_STATUS_THRESHOLD = 400

_LISTING_TYPE: dict[OwnerKind, tuple[str, str]] = {
    OwnerKind.ORG: ("orgs", "all"),
    OwnerKind.USER: ("users", "owner"),
}


class GitHubRepositoryClient(typ.Protocol):
    """Interface consumed by discovery and the asset resolver."""

    async def resolve_owner_kind(
        self, owner: str, *, override: str | None = None
    ) -> OwnerKind:
        """Return whether ``owner`` is an organisation or a user."""
        ...

    def iter_repositories(
        self, owner: str, kind: OwnerKind
    ) -> cabc.AsyncIterator[RemoteRepository]:
        """Yield every repository owned by ``owner``."""
        ...

    async def get_file_text(self, repo: RemoteRepository, path: str) -> str | None:
        """Return decoded file text, or ``None`` when the file is absent."""
        ...

    async def get_release_by_tag(
        self, repo: RemoteRepository, tag: str
    ) -> dict[str, typ.Any] | None:
        """Return the release payload for ``tag``, or ``None``."""
        ...

    async def head_status(self, url: str) -> int:
        """Return the final status of an unauthenticated ``HEAD`` request."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST API client."""

    token: str
    api_url: str = DEFAULT_API_URL
    timeout_s: float = 20.0
    user_agent: str = "ecoregistry/0.1"

    @classmethod
    def from_env(cls) -> GitHubRestConfig:
        """Build configuration from ``GH_TOKEN`` and ``ECOREGISTRY_API_URL``."""
        token = os.environ.get("GH_TOKEN", "").strip()
        if not token:
            raise GitHubConfigError.missing_token()
        api_url = os.environ.get("ECOREGISTRY_API_URL", "").strip()
        return cls(token=token, api_url=api_url or DEFAULT_API_URL)


def parse_owner_kind(value: str | None) -> OwnerKind | None:
    """Parse an owner kind override; blank means auto-detect."""
    if value is None or not value.strip():
        return None
    try:
        return OwnerKind(value.strip().lower())
    except ValueError as exc:
        raise GitHubConfigError.invalid_owner_kind(value) from exc


def _quote(segment: str) -> str:
    return urllib.parse.quote(segment, safe="")


def _repository_from_payload(owner: str, item: object) -> RemoteRepository:
    if not isinstance(item, dict):
        raise GitHubResponseShapeError.missing("repos[]")
    name = item.get("name")
    if not isinstance(name, str) or not name:
        raise GitHubResponseShapeError.missing("repos[].name")
    return RemoteRepository(owner=owner, name=name)


def _decode_file_content(payload: dict[str, typ.Any]) -> str:
    content = payload.get("content")
    if not isinstance(content, str):
        raise GitHubResponseShapeError.missing("content")
    # GitHub wraps base64 content at 60 columns; b64decode drops the newlines.
    return base64.b64decode(content).decode("utf-8")


class GitHubRestClient:
    """httpx-backed implementation of :class:`GitHubRepositoryClient`."""

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.token.strip():
            raise GitHubConfigError.empty_token()

        self._config = config
        self._base_url = config.api_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers={"User-Agent": config.user_agent},
        )
        self._api_headers = {
            "Authorization": f"Bearer {config.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GitHubRestClient:
        """Return the client for use in ``async with`` blocks."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close owned resources on exit."""
        await self.aclose()

    async def resolve_owner_kind(
        self, owner: str, *, override: str | None = None
    ) -> OwnerKind:
        """Return the owner kind, probing the org endpoint before the user one.

        Raises
        ------
        GitHubConfigError
            If ``override`` is neither ``org`` nor ``user``.
        OwnerResolutionError
            If neither lookup finds ``owner``.

        """
        explicit = parse_owner_kind(override)
        if explicit is not None:
            return explicit

        if await self._get_json(f"/orgs/{_quote(owner)}") is not None:
            return OwnerKind.ORG
        if await self._get_json(f"/users/{_quote(owner)}") is not None:
            return OwnerKind.USER
        raise OwnerResolutionError(owner)

    async def iter_repositories(
        self, owner: str, kind: OwnerKind
    ) -> typ.AsyncIterator[RemoteRepository]:
        """Yield repositories page by page until a short or empty page."""
        collection, listing_type = _LISTING_TYPE[kind]
        path = f"/{collection}/{_quote(owner)}/repos"
        page = 1
        while True:
            data = await self._get_json(
                path,
                params={"per_page": PAGE_SIZE, "page": page, "type": listing_type},
            )
            if data is None:
                return
            if not isinstance(data, list):
                raise GitHubResponseShapeError.missing("repos")
            for item in data:
                yield _repository_from_payload(owner, item)
            if len(data) < PAGE_SIZE:
                return
            page += 1

    async def get_file_text(self, repo: RemoteRepository, path: str) -> str | None:
        """Return a file's UTF-8 text, or ``None`` when it is not a regular file."""
        data = await self._get_json(
            f"/repos/{_quote(repo.owner)}/{_quote(repo.name)}/contents/"
            f"{urllib.parse.quote(path.lstrip('/'))}"
        )
        if not isinstance(data, dict) or data.get("type") != "file":
            return None
        return _decode_file_content(data)

    async def get_release_by_tag(
        self, repo: RemoteRepository, tag: str
    ) -> dict[str, typ.Any] | None:
        """Return the release tagged ``tag``; a missing release yields ``None``."""
        data = await self._get_json(
            f"/repos/{_quote(repo.owner)}/{_quote(repo.name)}/releases/tags/"
            f"{_quote(tag)}"
        )
        if data is None:
            return None
        if not isinstance(data, dict):
            raise GitHubResponseShapeError.missing("release")
        return data

    async def head_status(self, url: str) -> int:
        """Issue ``HEAD`` without API credentials and return the final status."""
        response = await self._client.head(url, follow_redirects=True)
        return response.status_code

    async def _get_json(
        self,
        path: str,
        *,
        params: dict[str, typ.Any] | None = None,
    ) -> typ.Any:  # noqa: ANN401 - raw decoded JSON
        """GET an API path; 404 yields ``None``, other errors raise."""
        response = await self._client.get(
            f"{self._base_url}{path}",
            params=params,
            headers=self._api_headers,
        )
        if response.status_code == _HTTP_NOT_FOUND:
            return None
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(response.status_code, path)
        return response.json()
