"""Pytest configuration and fixtures for sdtp_client tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from unittest.mock import AsyncMock, MagicMock

import pytest

from sdtp_client import SdtpClipboardClient


def create_mock_stream(
    read_data: bytes = b"",
    *,
    can_write_eof: bool = True,
) -> tuple[MagicMock, MagicMock]:
    """Create a configured (reader, writer) pair for asyncio.open_connection.

    Args:
        read_data: Bytes returned by reader.read()
        can_write_eof: Value returned by writer.can_write_eof()

    Returns:
        Mock StreamReader and StreamWriter
    """
    reader = MagicMock(spec=asyncio.StreamReader)
    reader.read = AsyncMock(return_value=read_data)

    writer = MagicMock(spec=asyncio.StreamWriter)
    writer.drain = AsyncMock()
    writer.wait_closed = AsyncMock()
    writer.can_write_eof.return_value = can_write_eof

    return reader, writer


def written_bytes(writer: MagicMock) -> bytes:
    """Concatenate everything passed to writer.write()."""
    return b"".join(call.args[0] for call in writer.write.call_args_list)


@dataclass
class FakeClipboardServer:
    """In-memory SDTP server speaking the /lcb/ path conventions."""

    store: dict[str, list[tuple[str, bytes]]] = field(default_factory=dict)
    requests: list[str] = field(default_factory=list)
    host: str = "127.0.0.1"
    port: int = 0

    def _error(self, message: str) -> bytes:
        return f"SDTP-ERROR: {message}".encode()

    def _history(self, name: str) -> bytes:
        lines = []
        for index, (version, data) in enumerate(self.store[name]):
            lines.append(f"Item {name}:{version}")
            lines.append(f"  Date: 2024-01-{index + 1:02d}T12:00:00")
            lines.append(f"  Size: {len(data)}")
        return ("\n".join(lines) + "\n").encode()

    def handle(self, request_line: str, body: bytes) -> bytes:
        self.requests.append(request_line)
        verb, path, proto = request_line.split(" ")
        if proto != "SDTP/1.0" or not path.startswith("/lcb/"):
            return self._error("bad request")

        name, *parts = path[len("/lcb/") :].split(":")
        if verb == "PUT":
            versions = self.store.setdefault(name, [])
            versions.append((str(len(versions) + 1), body))
            return b""

        if not self.store.get(name):
            return self._error("clipboard not found")
        versions = self.store[name]

        if not parts:
            return versions[-1][1]
        if parts == ["q"]:
            return self._history(name)
        if parts == ["D"]:
            del self.store[name]
            return b""

        matching = [v for v in versions if v[0] == parts[0]]
        if not matching:
            return self._error(f"version {parts[0]} not found")
        if parts[1:] == ["d"]:
            versions.remove(matching[0])
            return b""
        return matching[0][1]

    async def serve_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        raw = await reader.read()
        header, _, body = raw.partition(b"\n\n")
        writer.write(self.handle(header.decode("ascii"), body))
        await writer.drain()
        writer.close()
        await writer.wait_closed()


@pytest.fixture
async def sdtp_server() -> AsyncIterator[FakeClipboardServer]:
    """Run a loopback SDTP server for the duration of a test."""
    fake = FakeClipboardServer()
    server = await asyncio.start_server(fake.serve_client, fake.host, 0)
    fake.port = server.sockets[0].getsockname()[1]
    async with server:
        yield fake


@pytest.fixture
def sdtp_client(sdtp_server: FakeClipboardServer) -> SdtpClipboardClient:
    """Client pointed at the loopback server."""
    return SdtpClipboardClient(sdtp_server.host, sdtp_server.port, timeout=5.0)
