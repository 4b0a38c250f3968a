"""Merge freshly scanned entries with the previous registry.

Rules applied per listed repository:

* a scan returning ``None`` leaves the repository out;
* a scan returning an entry replaces any previous entry; the repository is
  counted as ``unchanged`` when it was registered before (presence-based,
  field changes are not compared) and as ``added`` otherwise;
* a scan that raises counts as ``failed`` and carries the previous entry
  forward verbatim when there is one.

A repository listed more than once is scanned only the first time.

Previous entries whose repository was not represented in the output are
then carried forward unchanged, so the registry never shrinks. The result
is sorted by ``repo``.
"""

from __future__ import annotations

import typing as typ

from ecoregistry.logging import get_logger, log_debug
from ecoregistry.observability import DiscoveryEventLogger, PreservedReason

from .models import ReconcileResult
from .store import sort_records

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from ecoregistry.github.models import RemoteRepository

    from .models import RegistryEntry, RegistryRecord

    type Scan = cabc.Callable[
        [RemoteRepository], cabc.Awaitable[RegistryEntry | None]
    ]

logger = get_logger(__name__)


def index_records(records: typ.Iterable[RegistryRecord]) -> dict[str, RegistryRecord]:
    """Key records by ``repo``; a later duplicate replaces an earlier one."""
    return {record["repo"]: record for record in records}


async def reconcile_registry(
    existing: typ.Iterable[RegistryRecord],
    repositories: typ.Iterable[RemoteRepository],
    scan: Scan,
    *,
    events: DiscoveryEventLogger | None = None,
) -> ReconcileResult:
    """Scan ``repositories`` in order and merge the results with ``existing``.

    Parameters
    ----------
    existing
        Records from the previous registry file.
    repositories
        Repositories listed for the owner during this run.
    scan
        Coroutine function returning the fresh entry for a repository, or
        ``None`` when the repository does not participate.
    events
        Event logger; a default :class:`DiscoveryEventLogger` is used when
        omitted.

    Returns
    -------
    ReconcileResult
        Sorted entries plus added/unchanged/failed/preserved counters.

    """
    event_logger = events or DiscoveryEventLogger()
    previous = index_records(existing)
    result = ReconcileResult()
    represented: set[str] = set()
    listed: set[str] = set()

    for repo in repositories:
        slug = repo.slug
        if slug in listed:
            log_debug(logger, "%s listed more than once; skipping repeat", slug)
            continue
        listed.add(slug)
        try:
            entry = await scan(repo)
        except Exception as exc:  # noqa: BLE001 - one repository never aborts the run
            kept = previous.get(slug)
            event_logger.log_repository_failed(
                repo_slug=slug, error=exc, kept_previous=kept is not None
            )
            if kept is not None:
                result.entries.append(kept)
                represented.add(slug)
            result.failed += 1
            continue

        if entry is None:
            continue

        result.entries.append(entry.to_record())
        represented.add(entry.repo)
        if entry.repo in previous:
            result.unchanged += 1
        else:
            result.added += 1
            event_logger.log_entry_added(repo_slug=entry.repo, package=entry.package)

    for slug, record in previous.items():
        if slug in represented:
            continue
        reason = (
            PreservedReason.MARKER_SKIPPED
            if slug in listed
            else PreservedReason.MISSING_FROM_LISTING
        )
        event_logger.log_entry_preserved(repo_slug=slug, reason=reason)
        result.entries.append(record)
        result.preserved += 1

    result.entries = sort_records(result.entries)
    return result
