from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from .acquire import copy_local_tree, fetch_remote_tree, remove_path
from .components import Group
from .config import GroupSpec, SyncConfig
from .http_client import HttpClient
from .processor import DocumentProcessor
from .reporter import Reporter


class GroupPipeline:
    """Acquire one group's source tree, then sync its component pages."""

    def __init__(
        self,
        spec: GroupSpec,
        *,
        config: SyncConfig,
        http: HttpClient,
        reporter: Reporter,
        local_dir: Path | None = None,
    ) -> None:
        self.spec = spec
        self.config = config
        self.http = http
        self.reporter = reporter
        self.local_dir = local_dir

    @property
    def work_dir(self) -> Path:
        return self.config.work_dir(self.spec)

    async def acquire(self) -> Path:
        if self.local_dir is not None:
            return await asyncio.to_thread(
                copy_local_tree, self.local_dir, self.work_dir
            )
        return await asyncio.to_thread(
            fetch_remote_tree,
            self.http,
            self.spec.remote_url,
            archive_path=self.config.archive_path(self.spec),
            destination=self.work_dir,
        )

    async def run(self) -> list[Path]:
        source_root = await self.acquire()
        processor = DocumentProcessor(
            source_root=source_root,
            output_root=self.config.source_dir,
            reporter=self.reporter,
        )
        return await processor.process(self.spec.components)


def clean(config: SyncConfig) -> None:
    for path in config.temp_paths():
        remove_path(path)


async def run_sync(
    config: SyncConfig,
    *,
    http: HttpClient,
    reporter: Reporter,
    local_dirs: dict[Group, Path] | None = None,
) -> dict[Group, list[Path]]:
    """Run the core and extensions lanes concurrently.

    Both lanes always settle before temporary trees are removed; the first
    lane failure (core before extensions) is raised afterwards.
    """

    local_dirs = local_dirs or {}
    shutil.rmtree(config.examples_dir, ignore_errors=True)

    lanes = [
        GroupPipeline(
            config.group_spec(group),
            config=config,
            http=http,
            reporter=reporter,
            local_dir=local_dirs.get(group),
        )
        for group in Group
    ]
    try:
        results = await asyncio.gather(
            *(lane.run() for lane in lanes), return_exceptions=True
        )
    finally:
        clean(config)

    written: dict[Group, list[Path]] = {}
    for lane, result in zip(lanes, results):
        if isinstance(result, BaseException):
            raise result
        written[lane.spec.group] = result
    return written
