"""GitHub REST client errors."""

from __future__ import annotations


class GitHubAPIError(RuntimeError):
    """Raised when GitHub returns an error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, path: str) -> GitHubAPIError:
        """Return an error for a non-2xx, non-404 HTTP response."""
        return cls(f"GitHub API error {status_code}: {path}", status_code=status_code)


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub REST responses are missing expected fields."""

    @classmethod
    def missing(cls, field: str) -> GitHubResponseShapeError:
        """Return an error for a missing or mistyped response field."""
        return cls(f"GitHub API response missing expected field: {field}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def missing_token(cls) -> GitHubConfigError:
        """Return an error when no GitHub token is configured."""
        return cls("GH_TOKEN is required for the GitHub API")

    @classmethod
    def missing_owner(cls) -> GitHubConfigError:
        """Return an error when no repository owner is configured."""
        return cls("GH_ORG is required to choose which repositories to scan")

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")

    @classmethod
    def invalid_owner_kind(cls, value: str) -> GitHubConfigError:
        """Return an error for an owner kind override other than org/user."""
        return cls(f"Owner type must be 'org' or 'user', got {value!r}")


class OwnerResolutionError(RuntimeError):
    """Raised when an owner is neither an organisation nor a user."""

    def __init__(self, owner: str) -> None:
        """Initialise with the owner that could not be resolved."""
        self.owner = owner
        super().__init__(f"Could not resolve {owner!r} as a GitHub org or user")
