"""High-level client for SDTP clipboard servers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from . import transport
from .encoding import DEFAULT_ENCODING, TextBody, decode_payload, encode_body
from .errors import SdtpClientError, SdtpConnectionError, SdtpProtocolError
from .history import VersionRecord, parse_history
from .protocol import (
    Method,
    delete_clipboard_path,
    delete_version_path,
    history_path,
    latest_path,
    version_path,
    write_path,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .config import ClientConfig

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemResult:
    """Outcome of one clipboard in a batch operation."""

    clipboard: str
    value: Any = None
    error: SdtpClientError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SdtpClipboardClient:
    """Clipboard operations over SDTP, one connection per request."""

    def __init__(
        self,
        server: str,
        port: int,
        *,
        timeout: float | None = None,
        encoding: str | None = None,
    ) -> None:
        self._server = server
        self._port = port
        self._timeout = timeout
        self._encoding = encoding

    @classmethod
    def from_config(cls, config: ClientConfig) -> SdtpClipboardClient:
        return cls(
            config.server,
            config.port,
            timeout=config.timeout,
            encoding=config.encoding,
        )

    @property
    def server(self) -> str:
        return self._server

    @property
    def port(self) -> int:
        return self._port

    async def _request(
        self,
        clipboard: str,
        path: str,
        method: Method = Method.READ,
        body: bytes | None = None,
    ) -> bytes:
        response = await transport.send(
            self._server,
            self._port,
            path,
            method,
            body,
            timeout=self._timeout,
        )
        response.raise_for_error(clipboard)
        return response.payload

    async def read(
        self,
        clipboard: str,
        version: str | int | None = None,
        *,
        encoding: str | None = None,
    ) -> bytes | str:
        """Read the latest or a specific version of a clipboard.

        Returns raw bytes unless an encoding is given here or on the client.

        Raises:
            SdtpProtocolError: If the server answered with an error.
            SdtpConnectionError: If the request failed.
        """
        if version is None:
            path = latest_path(clipboard)
        else:
            path = version_path(clipboard, version)
        payload = await self._request(clipboard, path)
        return decode_payload(payload, encoding or self._encoding)

    async def history_text(self, clipboard: str) -> str:
        """Fetch the raw history listing of a clipboard."""
        payload = await self._request(clipboard, history_path(clipboard))
        text = decode_payload(payload, self._encoding or DEFAULT_ENCODING)
        if isinstance(text, bytes):
            text = text.decode(DEFAULT_ENCODING, errors="replace")
        return text

    async def history(self, clipboard: str) -> list[VersionRecord]:
        """Fetch and parse the history listing of a clipboard."""
        return parse_history(clipboard, await self.history_text(clipboard))

    async def write(
        self,
        clipboard: str,
        body: bytes | str | TextBody,
        *,
        encoding: str | None = None,
    ) -> None:
        """Store ``body`` as a new version of a clipboard.

        Text bodies are encoded with ``encoding`` (or the client's), bytes
        are sent unchanged.
        """
        data = encode_body(body, encoding or self._encoding)
        await self._request(clipboard, write_path(clipboard), Method.WRITE, data)
        _LOGGER.debug("Wrote %d bytes to clipboard %s", len(data), clipboard)

    async def delete(self, clipboard: str, version: str | int | None = None) -> None:
        """Delete a whole clipboard, or one version of it.

        The server answers deletes on the read channel; a successful answer
        is discarded.
        """
        if version is None:
            path = delete_clipboard_path(clipboard)
        else:
            path = delete_version_path(clipboard, version)
        await self._request(clipboard, path)
        _LOGGER.debug("Deleted %s", path)

    async def read_many(
        self,
        clipboards: Iterable[str],
        version: str | int | None = None,
        *,
        encoding: str | None = None,
    ) -> list[ItemResult]:
        """Read several clipboards in order, recording per-item failures."""
        results: list[ItemResult] = []
        for clipboard in clipboards:
            try:
                value = await self.read(clipboard, version, encoding=encoding)
            except (SdtpProtocolError, SdtpConnectionError, ValueError) as err:
                results.append(self._failed(clipboard, err))
            else:
                results.append(ItemResult(clipboard, value))
        return results

    async def history_many(self, clipboards: Iterable[str]) -> list[ItemResult]:
        """Fetch several history listings in order, recording failures."""
        results: list[ItemResult] = []
        for clipboard in clipboards:
            try:
                records = await self.history(clipboard)
            except (SdtpProtocolError, SdtpConnectionError, ValueError) as err:
                results.append(self._failed(clipboard, err))
            else:
                results.append(ItemResult(clipboard, records))
        return results

    async def delete_many(
        self,
        clipboards: Iterable[str],
        version: str | int | None = None,
    ) -> list[ItemResult]:
        """Delete several clipboards in order, recording per-item failures."""
        results: list[ItemResult] = []
        for clipboard in clipboards:
            try:
                await self.delete(clipboard, version)
            except (SdtpProtocolError, SdtpConnectionError, ValueError) as err:
                results.append(self._failed(clipboard, err))
            else:
                results.append(ItemResult(clipboard))
        return results

    @staticmethod
    def _failed(clipboard: str, err: Exception) -> ItemResult:
        if isinstance(err, SdtpProtocolError):
            _LOGGER.warning("[%s] Server error: %s", clipboard, err.message)
            return ItemResult(clipboard, error=err)
        if isinstance(err, SdtpConnectionError):
            _LOGGER.error("[%s] Connection failed: %s", clipboard, err)
            return ItemResult(clipboard, error=err)
        _LOGGER.error("[%s] Invalid request: %s", clipboard, err)
        return ItemResult(clipboard, error=SdtpClientError(str(err)))
