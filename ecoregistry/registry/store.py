"""Read and write the JSON registry file.

Previous entries are loaded as plain mappings rather than
:class:`~ecoregistry.registry.models.RegistryEntry` structs so that entries
carried forward are written back exactly as they were read, including any
fields this version does not know about.
"""

from __future__ import annotations

import os
import tempfile
import typing as typ
from pathlib import Path

import msgspec

from .errors import RegistryLoadError

if typ.TYPE_CHECKING:
    from .models import RegistryRecord

DEFAULT_REGISTRY_PATH = Path("registry.json")
INDENT = 2


def decode_registry(data: bytes, *, source: object = "<bytes>") -> list[RegistryRecord]:
    """Decode registry JSON, requiring an array of objects with a ``repo`` key."""
    try:
        loaded = msgspec.json.decode(data, type=list[dict[str, typ.Any]])
    except msgspec.ValidationError as exc:
        reason = f"expected a JSON array of objects: {exc}"
        raise RegistryLoadError(source, reason) from exc
    except msgspec.DecodeError as exc:
        raise RegistryLoadError(source, f"invalid JSON: {exc}") from exc

    for index, record in enumerate(loaded):
        if not isinstance(record.get("repo"), str):
            raise RegistryLoadError(source, f"entry {index} has no string 'repo'")
    return loaded


def load_registry(path: Path | str) -> list[RegistryRecord]:
    """Load the registry at ``path``.

    Raises
    ------
    RegistryLoadError
        If the file is missing, unreadable, or malformed.

    """
    path_obj = Path(path)
    try:
        data = path_obj.read_bytes()
    except OSError as exc:
        raise RegistryLoadError(path_obj, str(exc)) from exc
    return decode_registry(data, source=path_obj)


def sort_records(records: typ.Iterable[RegistryRecord]) -> list[RegistryRecord]:
    """Sort records by ``repo`` in code-point order."""
    return sorted(records, key=lambda record: record["repo"])


def dump_registry(records: typ.Iterable[RegistryRecord]) -> bytes:
    """Encode records as indented UTF-8 JSON with one trailing newline."""
    encoded = msgspec.json.encode(sort_records(records))
    return msgspec.json.format(encoded, indent=INDENT) + b"\n"


def write_registry(path: Path | str, records: typ.Iterable[RegistryRecord]) -> None:
    """Replace the registry at ``path`` in one atomic rename."""
    path_obj = Path(path)
    payload = dump_registry(records)
    directory = path_obj.parent
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path_obj.name}.", suffix=".tmp", dir=directory
    )
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        Path(tmp_name).replace(path_obj)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
