"""Structured discovery events emitted through femtologging.

Every event is one log line of the form ``[<event>] key=value ...`` so the
run can be followed in CI output and filtered by log aggregators.
"""

from __future__ import annotations

import enum
import typing as typ

from ecoregistry.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    from ecoregistry.registry.models import ReconcileResult

logger = get_logger(__name__)


class DiscoveryEventType(enum.StrEnum):
    """Structured log event types for discovery runs."""

    RUN_STARTED = "discovery.run.started"
    REPOSITORIES_LISTED = "discovery.repositories.listed"
    ENTRY_ADDED = "discovery.entry.added"
    ENTRY_PRESERVED = "discovery.entry.preserved"
    REPOSITORY_FAILED = "discovery.repository.failed"
    ASSET_UNREACHABLE = "discovery.asset.unreachable"
    RUN_COMPLETED = "discovery.run.completed"


class PreservedReason(enum.StrEnum):
    """Why a previous registry entry was carried forward unchanged."""

    MISSING_FROM_LISTING = "missing_from_listing"
    MARKER_SKIPPED = "marker_skipped"


class DiscoveryEventLogger:
    """Emit discovery lifecycle events."""

    def log_run_started(self, *, owner: str, owner_kind: str) -> None:
        """Log the start of a scan over ``owner``."""
        log_info(
            logger,
            "[%s] owner=%s owner_kind=%s",
            DiscoveryEventType.RUN_STARTED,
            owner,
            owner_kind,
        )

    def log_repositories_listed(self, *, owner: str, count: int) -> None:
        """Log how many repositories the listing returned."""
        log_info(
            logger,
            "[%s] owner=%s repositories=%d",
            DiscoveryEventType.REPOSITORIES_LISTED,
            owner,
            count,
        )

    def log_entry_added(self, *, repo_slug: str, package: str) -> None:
        """Log a repository joining the registry for the first time."""
        log_info(
            logger,
            "[%s] repo_slug=%s package=%s",
            DiscoveryEventType.ENTRY_ADDED,
            repo_slug,
            package,
        )

    def log_entry_preserved(
        self, *, repo_slug: str, reason: PreservedReason
    ) -> None:
        """Log a previous entry kept because no fresh entry replaced it."""
        log_info(
            logger,
            "[%s] repo_slug=%s reason=%s",
            DiscoveryEventType.ENTRY_PRESERVED,
            repo_slug,
            reason,
        )

    def log_repository_failed(
        self,
        *,
        repo_slug: str,
        error: BaseException,
        kept_previous: bool,
    ) -> None:
        """Log a repository whose scan raised.

        Parameters
        ----------
        repo_slug
            Repository slug in ``owner/name`` format.
        error
            Exception raised while scanning.
        kept_previous
            Whether a previous registry entry was carried forward.

        """
        log_error(
            logger,
            "[%s] repo_slug=%s error_type=%s error_message=%s kept_previous=%s",
            DiscoveryEventType.REPOSITORY_FAILED,
            repo_slug,
            type(error).__name__,
            str(error),
            kept_previous,
            exc_info=error,
        )

    def log_asset_unreachable(self, *, repo_slug: str, url: str) -> None:
        """Warn that a resolved atlas asset URL failed its reachability check."""
        log_warning(
            logger,
            "[%s] repo_slug=%s url=%s",
            DiscoveryEventType.ASSET_UNREACHABLE,
            repo_slug,
            url,
        )

    def log_run_completed(self, *, owner: str, result: ReconcileResult) -> None:
        """Log the run summary counters."""
        log_info(
            logger,
            "[%s] owner=%s total=%d added=%d unchanged=%d failed=%d preserved=%d",
            DiscoveryEventType.RUN_COMPLETED,
            owner,
            result.total,
            result.added,
            result.unchanged,
            result.failed,
            result.preserved,
        )
