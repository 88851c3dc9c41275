"""History listing parser.

A history listing is line-oriented text:

    Item <name>:<version>
      Date: <date-time>
      <Property>: <value>
    Item <name>:<version>
      ...

Parsing is a two-state machine over the pre-split lines. In
``NO_CURRENT_RECORD`` only header lines matter; in ``BUILDING_RECORD``
property lines are added to the current record, and a header line (or the
end of input) emits it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

_LOGGER = logging.getLogger(__name__)

DATE_PROPERTY = "date"

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")
_PROPERTY = re.compile(r"^\s*([^:\s][^:]*?)\s*:\s?(.*?)\s*$")


class ParserState(Enum):
    """States of the history parser."""

    NO_CURRENT_RECORD = "no_current_record"
    BUILDING_RECORD = "building_record"


@dataclass
class VersionRecord:
    """One stored version of a clipboard, as listed by the server.

    Attributes:
        clipboard: Clipboard name.
        version: Version token, kept as text.
        properties: Listing fields in order; ``Date`` is a datetime when it
            could be parsed, every other value is text.
    """

    clipboard: str
    version: str
    properties: dict[str, str | datetime] = field(default_factory=dict)

    @property
    def date(self) -> datetime | None:
        for name, value in self.properties.items():
            if name.lower() == DATE_PROPERTY and isinstance(value, datetime):
                return value
        return None


def parse_date(value: str) -> datetime | str:
    """Parse a listing date, keeping the raw text if it is not a date."""
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        _LOGGER.debug("Unparseable history date kept as text: %r", value)
        return value


def _header_pattern(clipboard: str) -> re.Pattern[str]:
    return re.compile(
        rf"^\s*Item\s+{re.escape(clipboard)}:([^\s:]+)\s*$",
        re.IGNORECASE,
    )


def parse_history(clipboard: str, text: str) -> list[VersionRecord]:
    """Parse a history listing into version records in encounter order.

    Lines that are neither a header for ``clipboard`` nor a ``name: value``
    property of the current record are ignored. A header for a different
    clipboard has the ``name: value`` shape, so inside a record it is kept
    as a property. Input without headers yields an empty list.
    """
    header = _header_pattern(clipboard)
    records: list[VersionRecord] = []
    state = ParserState.NO_CURRENT_RECORD
    current: VersionRecord | None = None

    for line in _LINE_SPLIT.split(text):
        if match := header.match(line):
            if state is ParserState.BUILDING_RECORD and current is not None:
                records.append(current)
            current = VersionRecord(clipboard=clipboard, version=match.group(1))
            state = ParserState.BUILDING_RECORD
            continue

        if state is not ParserState.BUILDING_RECORD or current is None:
            continue

        if prop := _PROPERTY.match(line):
            name, value = prop.group(1), prop.group(2)
            if name.lower() == DATE_PROPERTY:
                current.properties[name] = parse_date(value)
            else:
                current.properties[name] = value

    if state is ParserState.BUILDING_RECORD and current is not None:
        records.append(current)
    return records


def _format_value(value: str | datetime) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def render_history(records: Iterable[VersionRecord]) -> str:
    """Render records back into the listing format."""
    lines: list[str] = []
    for record in records:
        lines.append(f"Item {record.clipboard}:{record.version}")
        lines.extend(
            f"  {name}: {_format_value(value)}"
            for name, value in record.properties.items()
        )
    return "".join(f"{line}\n" for line in lines)
