"""Protocol helpers for SDTP request lines and response classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

PROTOCOL_VERSION: Final = "SDTP/1.0"
PATH_PREFIX: Final = "/lcb/"
ERROR_MARKER: Final = b"SDTP-ERROR:"

_FORBIDDEN_NAME_CHARS: Final = frozenset(" \t\r\n:")


class Method(Enum):
    """Client-level request methods and their wire verbs.

    There is no wire-level delete; deletes are READs of a delete path.
    """

    READ = "GET"
    WRITE = "PUT"

    @property
    def verb(self) -> str:
        return self.value


def _check_token(kind: str, value: str) -> str:
    if not value:
        raise ValueError(f"{kind} must not be empty")
    if any(char in _FORBIDDEN_NAME_CHARS for char in value):
        raise ValueError(f"{kind} {value!r} contains whitespace or ':'")
    return value


def latest_path(clipboard: str) -> str:
    """Path reading the latest version of a clipboard."""
    return f"{PATH_PREFIX}{_check_token('clipboard name', clipboard)}"


def version_path(clipboard: str, version: str | int) -> str:
    """Path reading one specific version."""
    return f"{latest_path(clipboard)}:{_check_token('version', str(version))}"


def history_path(clipboard: str) -> str:
    """Path returning the text history listing."""
    return f"{latest_path(clipboard)}:q"


def delete_clipboard_path(clipboard: str) -> str:
    """Path deleting every version of a clipboard."""
    return f"{latest_path(clipboard)}:D"


def delete_version_path(clipboard: str, version: str | int) -> str:
    """Path deleting a single version."""
    return f"{version_path(clipboard, version)}:d"


def write_path(clipboard: str) -> str:
    """Path used with WRITE to store a new version."""
    return latest_path(clipboard)


@dataclass(frozen=True)
class SdtpRequest:
    """A single SDTP request, alive for one round trip."""

    method: Method
    path: str
    body: bytes | None = None

    def header(self) -> bytes:
        """Render the request line followed by the blank separator line."""
        return f"{self.method.verb} {self.path} {PROTOCOL_VERSION}\n\n".encode("ascii")

    def to_bytes(self) -> bytes:
        """Render header plus unframed body bytes."""
        if self.body is None:
            return self.header()
        return self.header() + self.body


def is_error_payload(payload: bytes) -> bool:
    """Return True if ``payload`` starts with the error marker, ignoring case.

    Only the marker-sized prefix is decoded, so large data payloads are never
    decoded just to be classified.
    """
    if len(payload) < len(ERROR_MARKER):
        return False
    prefix = payload[: len(ERROR_MARKER)].decode("latin-1")
    return prefix.upper() == ERROR_MARKER.decode("latin-1")


def decode_error_message(payload: bytes) -> str:
    """Decode a full error payload into the server's message text."""
    return payload.decode("utf-8", errors="replace")
