"""Parser for the small YAML subset used by ``.ecosystem.yml`` marker files.

Marker files are not parsed as full YAML. The accepted grammar is:

* blank lines and ``#`` comment lines are ignored;
* ``key: value`` sets a scalar;
* ``key: [a, "b", c]`` sets an inline list;
* ``key:`` starts a block list whose items follow as indented ``- item`` lines.

Anything else is skipped without error. One leading and one trailing quote
character are stripped from values independently of each other.

Example
-------
>>> parse_marker("ecosystem: true\\ntags:\\n  - ml\\n  - 'infra'\\n")
{'ecosystem': 'true', 'tags': ['ml', 'infra']}

"""

from __future__ import annotations

import dataclasses
import enum
import re
import typing as typ

type RawValue = str | list[str]
type RawConfig = dict[str, RawValue]

_KEY_LINE = re.compile(r"^(?P<key>[A-Za-z_]+):\s*(?P<value>.*)$")
_LIST_ITEM_LINE = re.compile(r"^\s+-\s+(?P<value>.*)$")
_QUOTES = "'\""


def strip_quotes(value: str) -> str:
    """Strip one leading and one trailing quote character, then whitespace."""
    if value and value[0] in _QUOTES:
        value = value[1:]
    if value and value[-1] in _QUOTES:
        value = value[:-1]
    return value.strip()


def parse_inline_list(value: str) -> list[str]:
    """Split ``[a, b, c]`` into cleaned, non-empty items."""
    inner = value.removeprefix("[").removesuffix("]")
    items = (strip_quotes(part.strip()) for part in inner.split(","))
    return [item for item in items if item]


class LineKind(enum.Enum):
    """Shape of a single marker line."""

    IGNORED = "ignored"
    LIST_ITEM = "list_item"
    KEY = "key"
    OTHER = "other"


@dataclasses.dataclass(frozen=True, slots=True)
class MarkerLine:
    """A classified marker line."""

    kind: LineKind
    key: str | None = None
    value: str = ""


def classify_line(raw: str) -> MarkerLine:
    """Classify a raw line without regard to parser state."""
    line = raw.rstrip()
    stripped = line.lstrip()
    if not stripped or stripped.startswith("#"):
        return MarkerLine(LineKind.IGNORED)

    item = _LIST_ITEM_LINE.match(line)
    if item is not None:
        return MarkerLine(LineKind.LIST_ITEM, value=item.group("value").strip())

    match = _KEY_LINE.match(line)
    if match is not None:
        return MarkerLine(
            LineKind.KEY, key=match.group("key"), value=match.group("value").strip()
        )

    return MarkerLine(LineKind.OTHER)


class ParserState(enum.Enum):
    """States of :class:`MarkerParser`."""

    AWAITING_KEY = "awaiting_key"
    AWAITING_LIST_ITEM = "awaiting_list_item"


class MarkerParser:
    """Incremental marker parser fed one line at a time.

    In ``AWAITING_LIST_ITEM`` state, list item lines append to the list
    opened by the preceding ``key:`` line. Any other line that is not
    ignored returns the parser to ``AWAITING_KEY``.
    """

    def __init__(self) -> None:
        """Start with an empty config awaiting a key."""
        self.state = ParserState.AWAITING_KEY
        self._config: RawConfig = {}
        self._list: list[str] | None = None

    @property
    def config(self) -> RawConfig:
        """Return the values parsed so far."""
        return self._config

    def feed(self, raw: str) -> None:
        """Consume a single line of marker text."""
        line = classify_line(raw)
        if line.kind is LineKind.IGNORED:
            return

        if line.kind is LineKind.LIST_ITEM and self._list is not None:
            self._list.append(strip_quotes(line.value))
            return

        self.state = ParserState.AWAITING_KEY
        self._list = None
        if line.kind is not LineKind.KEY or line.key is None:
            return

        if line.value.startswith("["):
            self._config[line.key] = parse_inline_list(line.value)
        elif not line.value:
            self._list = []
            self._config[line.key] = self._list
            self.state = ParserState.AWAITING_LIST_ITEM
        else:
            self._config[line.key] = strip_quotes(line.value)

    def feed_lines(self, lines: typ.Iterable[str]) -> RawConfig:
        """Consume ``lines`` and return the resulting config."""
        for line in lines:
            self.feed(line)
        return self._config


def parse_marker(text: str) -> RawConfig:
    """Parse marker text into a mapping of scalars and string lists."""
    return MarkerParser().feed_lines(text.splitlines())
