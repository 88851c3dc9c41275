"""Stream transport for one SDTP request/response round trip."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from .errors import SdtpConnectionError, SdtpProtocolError, SdtpTimeout
from .protocol import Method, SdtpRequest, decode_error_message, is_error_payload

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawResponse:
    """Classified server response.

    Error responses never expose their payload as data: ``data`` raises the
    protocol error instead.
    """

    payload: bytes
    is_error: bool = False
    error_message: str | None = None

    @classmethod
    def from_payload(cls, payload: bytes) -> RawResponse:
        """Classify a complete response buffer."""
        if is_error_payload(payload):
            return cls(payload=payload, is_error=True, error_message=decode_error_message(payload))
        return cls(payload=payload)

    def raise_for_error(self, clipboard: str | None = None) -> None:
        """Raise SdtpProtocolError if the server answered with an error."""
        if self.is_error:
            raise SdtpProtocolError(self.error_message or "", clipboard)

    @property
    def data(self) -> bytes:
        self.raise_for_error()
        return self.payload


async def _close_writer(writer: asyncio.StreamWriter) -> None:
    writer.close()
    try:
        await writer.wait_closed()
    except OSError as err:
        _LOGGER.debug("Ignoring error while closing stream: %s", err)


async def _round_trip(
    server: str,
    port: int,
    request: SdtpRequest,
) -> bytes:
    reader, writer = await asyncio.open_connection(server, port)
    try:
        writer.write(request.to_bytes())
        await writer.drain()
        if writer.can_write_eof():
            writer.write_eof()
        return await reader.read()
    finally:
        await _close_writer(writer)


async def send(
    server: str,
    port: int,
    path: str,
    method: Method = Method.READ,
    body: bytes | None = None,
    *,
    timeout: float | None = None,
) -> RawResponse:
    """Send one SDTP request and read the whole response.

    Opens a fresh connection, writes the request line (and, for WRITE, the
    raw body), reads until the server closes the stream and classifies the
    result. The connection is closed on every exit path.

    Args:
        server: Server host name or address.
        port: Server TCP port.
        path: Request path, e.g. ``/lcb/name:q``.
        method: READ or WRITE.
        body: Raw body bytes sent after the header with no framing.
        timeout: Optional total timeout in seconds for the round trip.

    Returns:
        The classified RawResponse. Callers decide whether to raise on
        error via ``raise_for_error``.

    Raises:
        SdtpTimeout: If the round trip exceeded ``timeout``.
        SdtpConnectionError: If connecting or streaming failed.
    """
    request = SdtpRequest(method=method, path=path, body=body)
    _LOGGER.debug(
        "%s %s:%s%s (%d body bytes)",
        method.verb,
        server,
        port,
        path,
        len(body) if body is not None else 0,
    )
    try:
        payload = await asyncio.wait_for(_round_trip(server, port, request), timeout=timeout)
    except TimeoutError as err:
        raise SdtpTimeout(f"Request to {server}:{port}{path} timed out") from err
    except OSError as err:
        raise SdtpConnectionError(f"Request to {server}:{port}{path} failed: {err}") from err
    except UnicodeError as err:
        # IDNA rejects malformed host names before any lookup happens.
        raise SdtpConnectionError(f"Invalid server name {server!r}: {err}") from err

    response = RawResponse.from_payload(payload)
    _LOGGER.debug(
        "Received %d bytes for %s (error=%s)", len(payload), path, response.is_error
    )
    return response
