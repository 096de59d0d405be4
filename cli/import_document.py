"""Импорт файлов в хранилище документов чат-бэкенда."""

from __future__ import annotations

import argparse
import logging
import uuid
from pathlib import Path
from typing import Optional, Sequence

import httpx

from core.logging_setup import setup_logging
from core.settings import AUTH_NONE, AppConfig, load_config, validate_config
from importdoc.auth import TokenProvider, build_token_provider
from importdoc.errors import AuthenticationError, ConfigError, FileResolutionError
from importdoc.journal import ImportJournal
from importdoc.resolver import describe_import, resolve_files
from importdoc.uploader import NIL_CHAT_ID, DocumentUploader


logger = logging.getLogger("importdocument")

EXIT_OK = 0
EXIT_CONFIG = 2
EXIT_FILES = 3
EXIT_AUTH = 4
EXIT_REJECTED = 5


def _chat_id(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid chat id: {value}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="importdocument",
        description="Import files to the chat backend's document memory store.",
    )
    parser.add_argument(
        "--files",
        nargs="+",
        action="extend",
        required=True,
        metavar="PATH",
        help="Files to import; the file name part may be a wildcard pattern",
    )
    parser.add_argument(
        "--chat-id",
        type=_chat_id,
        default=NIL_CHAT_ID,
        help="Save the extracted context to an isolated chat collection",
    )
    parser.add_argument("--config", default=None, help="Path to importdocument.yaml")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def _open_journal(config: AppConfig) -> Optional[ImportJournal]:
    if not config.journal.path:
        return None
    try:
        return ImportJournal.open(Path(config.journal.path))
    except OSError as exc:
        raise ConfigError(f"Cannot open journal {config.journal.path}: {exc}") from exc


def main(
    argv: Optional[Sequence[str]] = None,
    token_provider: Optional[TokenProvider] = None,
    client: Optional[httpx.Client] = None,
) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        validate_config(config)
        log_cfg = config.logging
        setup_logging(
            level="DEBUG" if args.verbose else log_cfg.level,
            fmt=log_cfg.fmt,
            file=log_cfg.file,
            module_levels=log_cfg.module_levels,
        )
        journal = _open_journal(config)
    except (ConfigError, OSError) as exc:
        print(f"Error: Failed to read configuration. {exc}")
        return EXIT_CONFIG

    try:
        return _run(args, config, journal, token_provider, client)
    finally:
        if journal is not None:
            journal.close()


def _run(
    args: argparse.Namespace,
    config: AppConfig,
    journal: Optional[ImportJournal],
    token_provider: Optional[TokenProvider],
    client: Optional[httpx.Client],
) -> int:
    try:
        files = resolve_files(args.files)
    except FileResolutionError as exc:
        print(f"Error: {exc}")
        return EXIT_FILES
    print(describe_import(files))

    if journal is not None:
        journal.record("run_started", {"files": [str(path) for path in files], "chat_id": str(args.chat_id)})

    access_token = None
    if config.auth.type != AUTH_NONE:
        print("Attempting to authenticate user...")
        provider = token_provider or build_token_provider(config.auth)
        try:
            access_token = provider.acquire_token()
        except AuthenticationError as exc:
            print(f"Error: {exc}")
            print("Error: Failed to acquire access token.")
            if journal is not None:
                journal.record("run_finished", {"exit_code": EXIT_AUTH, "error": str(exc)})
            return EXIT_AUTH
        print("Successfully acquired access token. Continuing...")

    logger.debug("Uploading %s files to %s", len(files), config.service.uri)
    with DocumentUploader(config.service.uri, args.chat_id, access_token, client=client) as uploader:
        report = uploader.upload_all(files, journal=journal)

    exit_code = EXIT_REJECTED if report.aborted else EXIT_OK
    if journal is not None:
        journal.record(
            "run_finished",
            {
                "exit_code": exit_code,
                "attempted": report.attempted,
                "succeeded": report.succeeded,
                "rejected": report.rejected,
                "transport_errors": report.failed_transport,
                "unreadable": report.unreadable,
            },
        )
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
