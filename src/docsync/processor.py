from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable

from .components import ComponentRecord
from .errors import DocumentError, FilesystemError, NotFoundError
from .markdown import parse_markdown, read_preset, to_markdown
from .reporter import Reporter


class DocumentProcessor:
    """Rewrite every component README of one group into ``output_root``.

    Records are processed as concurrent tasks. A failing record does not
    cancel its siblings: the batch waits for all of them and then raises the
    first failure in completion order. Pages written by siblings are kept.
    """

    def __init__(
        self, *, source_root: Path, output_root: Path, reporter: Reporter
    ) -> None:
        self.source_root = source_root
        self.output_root = output_root
        self.reporter = reporter

    async def process(self, records: Iterable[ComponentRecord]) -> list[Path]:
        if not self.source_root.is_dir():
            raise NotFoundError(f"{self.source_root} does not exist")

        tasks = [
            asyncio.ensure_future(self.process_record(record)) for record in records
        ]
        written: list[Path] = []
        first_error: Exception | None = None
        for fut in asyncio.as_completed(tasks):
            try:
                written.append(await fut)
            except Exception as e:  # keep draining siblings
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error
        return written

    async def process_record(self, record: ComponentRecord) -> Path:
        markdown_file = self.source_root / record.readme
        output_path = self.output_root / record.output

        if not markdown_file.is_file():
            raise NotFoundError(f"{markdown_file} does not exist")

        text = await self._read_source(markdown_file)
        try:
            doc = parse_markdown(text)
        except DocumentError as e:
            raise DocumentError(f"{markdown_file}: {e}") from e
        preset = await asyncio.to_thread(read_preset, markdown_file.parent)

        page = to_markdown(
            title=doc.title,
            content=doc.content,
            setting={
                "deps": doc.deps,
                "name": record.name,
                "preset": preset,
                "preview": record.preview_enabled,
            },
        )
        await self._write_output(output_path, page)

        self.reporter.info(f"{record.output} synced")
        return output_path

    async def _read_source(self, path: Path) -> str:
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FilesystemError(f"Failed to read {path}: {e}") from e

    async def _write_output(self, path: Path, text: str) -> None:
        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8", newline="\n")

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise FilesystemError(f"Failed to write {path}: {e}") from e
