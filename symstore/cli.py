"""Command line entry point: ``symbols upload PATH``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from symstore import __version__
from symstore.exceptions import SymstoreError
from symstore.logging_config import setup_logging, verbosity_to_level
from symstore.settings import Settings
from symstore.storage.factory import build_backend
from symstore.upload import upload


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="symbols", description="Publish debug info files to a symbol store")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", dest="verbosity", action="count", default=0, help="Sets the level of verbosity")
    parser.add_argument("-c", "--config", type=Path, help="Path to config file")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file (rotated at 10 MB)")

    subcommands = parser.add_subparsers(dest="command", required=True)

    upload_cmd = subcommands.add_parser("upload", help="Upload the debug info files to a symbol server")
    upload_cmd.add_argument("path", type=Path, help="Path to search for debug info files")
    upload_cmd.add_argument("-r", "--recursive", action="store_true", help="Search path recursively")
    upload_cmd.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        help="Shows where the files would be uploaded, but does not run the upload",
    )
    upload_cmd.add_argument("--server", help="Name of the configured server to upload to")
    upload_cmd.add_argument("--workers", type=positive_int, help="Number of parallel uploads")
    upload_cmd.add_argument(
        "--aliases",
        action="store_true",
        default=None,
        help="Also publish ELF files under the legacy elf-buildid keys",
    )

    subcommands.add_parser("servers", help="List configured servers")
    return parser


def _run_upload(args: argparse.Namespace, settings: Settings) -> int:
    server = settings.upload_server(args.server)
    logger.info(f"Publishing to server '{server.label}'")
    backend = build_backend(server)
    try:
        report = upload(
            args.path,
            args.recursive,
            backend,
            dry_run=args.dry_run,
            workers=args.workers or settings.workers,
            aliases=settings.publish_aliases if args.aliases is None else args.aliases,
        )
    finally:
        backend.close()

    for outcome in report.published:
        print(f"{'would publish' if report.dry_run else 'published'} {outcome.path} -> {outcome.destination}")
    for outcome in report.skipped:
        print(f"skipped {outcome.path} -> {outcome.destination} ({outcome.reason})")
    for outcome in report.failed:
        print(f"failed {outcome.path} -> {outcome.destination} ({outcome.reason})", file=sys.stderr)
    return 0


def _run_servers(settings: Settings) -> int:
    for server in settings.servers:
        print(f"{server.label}\t{server.storage.type}\t{server.access.value}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(
        level=verbosity_to_level(args.verbosity),
        json_format=args.json_logs,
        log_file=args.log_file,
    )
    logger.trace("logger initialized")

    try:
        settings = Settings.load(args.config)
        if args.command == "servers":
            return _run_servers(settings)
        return _run_upload(args, settings)
    except SymstoreError as exc:
        logger.error(exc.message)
        print(f"error: {exc.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted, stopping")
        return 130


if __name__ == "__main__":
    sys.exit(main())
