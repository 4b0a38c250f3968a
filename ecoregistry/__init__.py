"""Ecosystem registry discovery.

``ecoregistry`` scans the repositories of a GitHub organisation or user for
``.ecosystem.yml`` opt-in markers and keeps ``registry.json`` in step with
what it finds: new participants are added, existing ones refreshed, and
entries whose repositories fail or vanish are kept as they were.

Examples
--------
>>> from ecoregistry.marker import parse_marker
>>> parse_marker("ecosystem: true\\nlanguage: r\\n")
{'ecosystem': 'true', 'language': 'r'}

"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
