"""Typed domain models for GitHub repository discovery."""

from __future__ import annotations

import dataclasses
import enum

from ecoregistry.common.slug import repo_slug


class OwnerKind(enum.StrEnum):
    """Whether repositories are listed through the org or user endpoints."""

    ORG = "org"
    USER = "user"


@dataclasses.dataclass(frozen=True, slots=True)
class RemoteRepository:
    """A repository returned by the owner listing."""

    owner: str
    name: str

    @property
    def slug(self) -> str:
        """Return owner/name, the registry key for this repository."""
        return repo_slug(self.owner, self.name)
