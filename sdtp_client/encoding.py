"""Payload encoding normalization between raw bytes and text."""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass
from typing import Final

from .errors import SdtpEncodingError

_LOGGER = logging.getLogger(__name__)

DEFAULT_ENCODING: Final = "utf-8"


@dataclass(frozen=True)
class TextBody:
    """Text payload tagged with the encoding to send it in."""

    text: str
    encoding: str | None = None


def resolve_encoding(name: str) -> str:
    """Resolve ``name`` against the registered text encodings.

    Returns:
        The canonical codec name.

    Raises:
        SdtpEncodingError: If no codec is registered under ``name``, or the
            codec is a bytes-to-bytes or str-to-str transform such as
            ``base64`` or ``rot13``.
    """
    try:
        info = codecs.lookup(name)
    except LookupError as err:
        raise SdtpEncodingError(name) from err
    if not getattr(info, "_is_text_encoding", True):
        raise SdtpEncodingError(name)
    return info.name


def _resolve_or_none(name: str) -> str | None:
    try:
        return resolve_encoding(name)
    except SdtpEncodingError as err:
        _LOGGER.warning("%s; falling back", err)
        return None


def decode_payload(payload: bytes, encoding: str | None = None) -> bytes | str:
    """Return payload as text in ``encoding``, or unchanged bytes.

    With no encoding, or one that cannot be resolved, the caller gets exactly
    the bytes the server sent.
    """
    if encoding is None:
        return payload
    codec = _resolve_or_none(encoding)
    if codec is None:
        return payload
    return payload.decode(codec, errors="replace")


def encode_body(
    body: bytes | bytearray | memoryview | str | TextBody,
    encoding: str | None = None,
) -> bytes:
    """Convert an outgoing body into wire bytes.

    Byte sequences bypass encoding entirely. Text is encoded with the
    resolved encoding (a TextBody's own encoding wins over ``encoding``),
    defaulting to UTF-8 when none is given or it cannot be resolved.

    Raises:
        TypeError: For any other body type.
    """
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)

    if isinstance(body, TextBody):
        text = body.text
        name = body.encoding or encoding
    elif isinstance(body, str):
        text = body
        name = encoding
    else:
        raise TypeError(
            f"Body must be bytes, str or TextBody, not {type(body).__name__}"
        )

    codec = _resolve_or_none(name) if name else None
    return text.encode(codec or DEFAULT_ENCODING)
