"""The persisted ecosystem registry and its reconciliation.

Usage
-----
Merge a run's scans into the previous registry and persist it::

    from ecoregistry.registry import (
        RepositoryScanner,
        load_registry,
        reconcile_registry,
        write_registry,
    )

    existing = load_registry("registry.json")
    scanner = RepositoryScanner(client)
    result = await reconcile_registry(existing, repositories, scanner.scan)
    write_registry("registry.json", result.entries)

"""

from ecoregistry.registry.errors import RegistryError, RegistryLoadError
from ecoregistry.registry.models import (
    ReconcileResult,
    RegistryEntry,
    RegistryRecord,
    format_timestamp,
)
from ecoregistry.registry.reconcile import index_records, reconcile_registry
from ecoregistry.registry.scanner import RepositoryScanner, ScanConfig
from ecoregistry.registry.store import (
    DEFAULT_REGISTRY_PATH,
    decode_registry,
    dump_registry,
    load_registry,
    sort_records,
    write_registry,
)

__all__ = [
    "DEFAULT_REGISTRY_PATH",
    "ReconcileResult",
    "RegistryEntry",
    "RegistryError",
    "RegistryLoadError",
    "RegistryRecord",
    "RepositoryScanner",
    "ScanConfig",
    "decode_registry",
    "dump_registry",
    "format_timestamp",
    "index_records",
    "load_registry",
    "reconcile_registry",
    "sort_records",
    "write_registry",
]
