from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

import requests

from .components import Group, default_manifest, load_manifest
from .config import SyncConfig
from .errors import SyncError, UserInputError
from .http_client import HttpClient
from .pipeline import run_sync
from .reporter import Reporter


def resolve_local_dir(raw: str, *, label: str, cwd: Path | None = None) -> Path:
    path = ((cwd or Path.cwd()) / raw).resolve()
    if not path.is_dir():
        raise UserInputError(f"Local {label} directory does not exist: {path}")
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsync",
        description=(
            "Sync core and extension component docs into source/. "
            "Sources are downloaded unless a local directory is given."
        ),
    )
    parser.add_argument(
        "--core",
        default=None,
        help="Local core repository to use instead of downloading it",
    )
    parser.add_argument(
        "--extensions",
        default=None,
        help="Local extensions repository to use instead of downloading it",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=None,
        help="Site root holding tools/ and source/ (default: current directory)",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="JSON manifest with 'core' and 'extensions' component lists",
    )
    parser.add_argument("--timeout", type=int, default=45)
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide download progress bars",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    reporter = Reporter()

    local_dirs: dict[Group, Path] = {}
    try:
        if args.core:
            local_dirs[Group.CORE] = resolve_local_dir(args.core, label="core")
            reporter.info(f"Using local core directory: {local_dirs[Group.CORE]}")
        if args.extensions:
            local_dirs[Group.EXTENSIONS] = resolve_local_dir(
                args.extensions, label="extensions"
            )
            reporter.info(
                f"Using local extensions directory: {local_dirs[Group.EXTENSIONS]}"
            )
        manifest = (
            load_manifest(args.manifest) if args.manifest else default_manifest()
        )
    except SyncError as e:
        reporter.error(str(e))
        return 1

    config = SyncConfig(
        base_dir=args.base_dir or Path.cwd(),
        manifest=manifest,
        timeout_s=int(args.timeout),
        progress=not bool(args.no_progress),
    )
    http = HttpClient(
        requests.Session(),
        timeout_s=config.timeout_s,
        progress=config.progress,
    )

    reporter.info("Syncing component docs...\n")
    try:
        asyncio.run(
            run_sync(config, http=http, reporter=reporter, local_dirs=local_dirs)
        )
    except (SyncError, OSError) as e:
        reporter.error(str(e))
        return 1

    reporter.info("\nSync complete!\n")
    return 0
