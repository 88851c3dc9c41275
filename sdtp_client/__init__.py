"""Client for SDTP clipboard servers."""

__version__ = "0.1.0"

from .client import ItemResult, SdtpClipboardClient
from .config import ClientConfig
from .encoding import TextBody, decode_payload, encode_body, resolve_encoding
from .errors import (
    SdtpClientError,
    SdtpConfigError,
    SdtpConnectionError,
    SdtpEncodingError,
    SdtpProtocolError,
    SdtpTimeout,
)
from .history import VersionRecord, parse_history, render_history
from .protocol import (
    Method,
    SdtpRequest,
    delete_clipboard_path,
    delete_version_path,
    history_path,
    latest_path,
    version_path,
    write_path,
)
from .transport import RawResponse, send

__all__ = [
    "ClientConfig",
    "ItemResult",
    "Method",
    "RawResponse",
    "SdtpClientError",
    "SdtpClipboardClient",
    "SdtpConfigError",
    "SdtpConnectionError",
    "SdtpEncodingError",
    "SdtpProtocolError",
    "SdtpRequest",
    "SdtpTimeout",
    "TextBody",
    "VersionRecord",
    "__version__",
    "decode_payload",
    "delete_clipboard_path",
    "delete_version_path",
    "encode_body",
    "history_path",
    "latest_path",
    "parse_history",
    "render_history",
    "resolve_encoding",
    "send",
    "version_path",
    "write_path",
]
