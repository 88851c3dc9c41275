"""Client configuration resolution.

Values are resolved per field, first match wins:

1. explicit arguments,
2. ``SDTP_*`` environment variables,
3. a YAML config file,
4. built-in defaults.

The transport never consults this module; callers resolve a ClientConfig and
pass its values in.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import yaml

from .errors import SdtpConfigError

DEFAULT_SERVER: Final = "localhost"
DEFAULT_PORT: Final = 4004

ENV_SERVER: Final = "SDTP_SERVER"
ENV_PORT: Final = "SDTP_PORT"
ENV_TIMEOUT: Final = "SDTP_TIMEOUT"
ENV_ENCODING: Final = "SDTP_ENCODING"


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping, treating an empty file as no settings."""
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as err:
        raise SdtpConfigError(f"Cannot read config file {path}: {err}") from err
    except yaml.YAMLError as err:
        raise SdtpConfigError(f"Invalid YAML in config file {path}: {err}") from err
    if not isinstance(data, dict):
        raise SdtpConfigError(f"Config file {path} must contain a mapping")
    return data


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _parse_port(value: Any) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError) as err:
        raise SdtpConfigError(f"Invalid port: {value!r}") from err
    if not 0 < port < 65536:
        raise SdtpConfigError(f"Port out of range: {port}")
    return port


def _parse_timeout(value: Any) -> float | None:
    if value is None:
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as err:
        raise SdtpConfigError(f"Invalid timeout: {value!r}") from err
    if timeout <= 0:
        raise SdtpConfigError(f"Timeout must be positive: {timeout}")
    return timeout


@dataclass(frozen=True)
class ClientConfig:
    """Resolved connection settings for the clipboard client.

    Attributes:
        server: Server host name or address.
        port: Server TCP port.
        timeout: Optional per-request timeout in seconds.
        encoding: Default text encoding, or None for raw bytes.
    """

    server: str = DEFAULT_SERVER
    port: int = DEFAULT_PORT
    timeout: float | None = None
    encoding: str | None = None

    @classmethod
    def resolve(
        cls,
        server: str | None = None,
        port: int | str | None = None,
        *,
        timeout: float | str | None = None,
        encoding: str | None = None,
        config_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ClientConfig:
        """Resolve settings from arguments, environment, file and defaults."""
        env = os.environ if environ is None else environ
        file_data = _load_yaml(Path(config_file)) if config_file else {}

        return cls(
            server=str(
                _first(server, env.get(ENV_SERVER), file_data.get("server"), DEFAULT_SERVER)
            ),
            port=_parse_port(
                _first(port, env.get(ENV_PORT), file_data.get("port"), DEFAULT_PORT)
            ),
            timeout=_parse_timeout(
                _first(timeout, env.get(ENV_TIMEOUT), file_data.get("timeout"))
            ),
            encoding=_first(encoding, env.get(ENV_ENCODING), file_data.get("encoding")),
        )
