"""Command-line interface for SDTP clipboards."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from typing import BinaryIO

from .client import ItemResult, SdtpClipboardClient
from .config import ClientConfig
from .errors import SdtpClientError, SdtpConfigError
from .history import VersionRecord


def _format_record(record: VersionRecord) -> str:
    fields = " ".join(
        f"{name}={value.isoformat() if isinstance(value, datetime) else value}"
        for name, value in record.properties.items()
    )
    return f"{record.clipboard}:{record.version} {fields}".rstrip()


def _report_errors(results: list[ItemResult], stderr: BinaryIO) -> int:
    failed = 0
    for result in results:
        if result.error is not None:
            failed += 1
            stderr.write(f"{result.clipboard}: {result.error}\n".encode())
    return 1 if failed else 0


async def cmd_get(
    client: SdtpClipboardClient,
    args: argparse.Namespace,
    stdout: BinaryIO,
    stderr: BinaryIO,
) -> int:
    if args.history:
        results = await client.history_many(args.names)
        for result in results:
            for record in result.value or ():
                stdout.write(f"{_format_record(record)}\n".encode())
        return _report_errors(results, stderr)

    results = await client.read_many(args.names, args.version, encoding=args.encoding)
    for result in results:
        if not result.ok:
            continue
        value = result.value
        stdout.write(value.encode() if isinstance(value, str) else value)
    return _report_errors(results, stderr)


async def cmd_set(
    client: SdtpClipboardClient,
    args: argparse.Namespace,
    stdin: BinaryIO,
    stderr: BinaryIO,
) -> int:
    if args.file:
        try:
            with open(args.file, "rb") as f:
                raw = f.read()
        except OSError as err:
            stderr.write(f"{args.name}: cannot read {args.file}: {err.strerror}\n".encode())
            return 1
    else:
        raw = stdin.read()
    # Local input is UTF-8 text when an encoding is requested.
    body: bytes | str = raw.decode("utf-8", errors="replace") if args.encoding else raw
    try:
        await client.write(args.name, body, encoding=args.encoding)
    except (SdtpClientError, ValueError) as err:
        stderr.write(f"{args.name}: {err}\n".encode())
        return 1
    return 0


async def cmd_delete(
    client: SdtpClipboardClient,
    args: argparse.Namespace,
    stderr: BinaryIO,
) -> int:
    results = await client.delete_many(args.names, args.version)
    return _report_errors(results, stderr)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sdtp-clipboard",
        description="Read, write and delete versioned clipboards over SDTP.",
    )
    p.add_argument("--server", help="server host (env SDTP_SERVER)")
    p.add_argument("--port", type=int, help="server port (env SDTP_PORT)")
    p.add_argument("--timeout", type=float, help="per-request timeout in seconds")
    p.add_argument("--config", help="YAML file with server/port/timeout/encoding")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    get = sub.add_parser("get", aliases=["read"], help="print clipboards")
    get.add_argument("names", nargs="+")
    get.add_argument("--version")
    get.add_argument(
        "--history",
        action="store_true",
        help="list stored versions; not combinable with --version or --encoding",
    )
    get.add_argument("--encoding", help="decode as text in this encoding")
    get.set_defaults(cmd="get")

    put = sub.add_parser("set", aliases=["write", "put"], help="store a new version")
    put.add_argument("name")
    put.add_argument("--file", help="read the body from this file instead of stdin")
    put.add_argument("--encoding", help="send the body as text in this encoding")
    put.set_defaults(cmd="set")

    delete = sub.add_parser("delete", aliases=["rm"], help="delete clipboards")
    delete.add_argument("names", nargs="+")
    delete.add_argument("--version", help="delete only this version")
    delete.set_defaults(cmd="delete")

    return p


async def _run(client: SdtpClipboardClient, args: argparse.Namespace) -> int:
    stdout = sys.stdout.buffer
    stderr = sys.stderr.buffer
    try:
        if args.cmd == "get":
            return await cmd_get(client, args, stdout, stderr)
        if args.cmd == "set":
            return await cmd_set(client, args, sys.stdin.buffer, stderr)
        return await cmd_delete(client, args, stderr)
    finally:
        stdout.flush()
        stderr.flush()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.cmd == "get" and args.history and (args.version or args.encoding):
        parser.error("--history cannot be combined with --version or --encoding")
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = ClientConfig.resolve(
            args.server,
            args.port,
            timeout=args.timeout,
            config_file=args.config,
        )
    except SdtpConfigError as err:
        parser.error(str(err))

    client = SdtpClipboardClient.from_config(config)
    return asyncio.run(_run(client, args))


if __name__ == "__main__":
    raise SystemExit(main())
