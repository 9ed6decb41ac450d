"""Parse component READMEs and serialize synced pages.

A component README looks like::

    # mip-img 图片

    图片用于展示大图，支持响应式与懒加载。

    标题|内容
    ----|----
    类型|通用
    所需脚本|https://c.mipcdn.com/static/v1/mip-img/mip-img.js

The first level-1 heading is the title and everything after it is the body.
Dependencies come from a ``deps`` key in optional YAML front-matter, or else
from the script URLs listed in the "required scripts" table row.

Synced pages put a settings block in front-matter, then the restored heading,
then the untouched body.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import frontmatter
import yaml

from .errors import DocumentError, FilesystemError

PRESET_FILENAME = "preset.json"

_TITLE_RE = re.compile(r"^#[ \t]+(?P<title>.+?)(?:[ \t]+#+)?[ \t]*$")
_DEPS_ROW_RE = re.compile(
    r"^\s*\|?\s*(?:所需脚本|required\s+scripts?)\s*\|(?P<cell>.*)$",
    re.IGNORECASE,
)
_SCRIPT_URL_RE = re.compile(r"https?://[^\s|<>()\[\]]+?\.js\b")


@dataclass(frozen=True)
class ParsedDocument:
    title: str
    content: str
    deps: list[str] = field(default_factory=list)


def _dedupe(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def _deps_from_metadata(metadata: dict[str, Any]) -> list[str] | None:
    raw = metadata.get("deps")
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raise DocumentError(
            f"deps must be a string or a list, not {type(raw).__name__}"
        )
    return _dedupe([str(dep).strip() for dep in raw if str(dep).strip()])


def _deps_from_table(body: str) -> list[str]:
    deps: list[str] = []
    for line in body.splitlines():
        m = _DEPS_ROW_RE.match(line)
        if m:
            deps.extend(_SCRIPT_URL_RE.findall(m.group("cell")))
    return _dedupe(deps)


def _trim_blank_lines(lines: list[str]) -> str:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return "\n".join(lines[start:end])


def _split_title(body: str) -> tuple[str, str]:
    lines = body.splitlines()
    for i, line in enumerate(lines):
        if not line.strip():
            continue
        m = _TITLE_RE.match(line)
        if m is None:
            break
        return m.group("title"), _trim_blank_lines(lines[i + 1 :])
    return "", _trim_blank_lines(lines)


def parse_markdown(text: str) -> ParsedDocument:
    metadata: dict[str, Any] = {}
    body = text.replace("\r\n", "\n")
    if frontmatter.checks(body):
        try:
            post = frontmatter.loads(body)
        except (yaml.YAMLError, ValueError) as e:
            raise DocumentError(f"Invalid front-matter: {e}") from e
        if isinstance(post.metadata, dict):
            metadata = dict(post.metadata)
        body = post.content

    title, content = _split_title(body)
    deps = _deps_from_metadata(metadata)
    if deps is None:
        deps = _deps_from_table(content)
    return ParsedDocument(title=title, content=content, deps=deps)


def to_markdown(*, title: str, content: str, setting: dict[str, Any]) -> str:
    """Serialize a page: settings front-matter, ``# title``, then the body."""

    meta = {k: v for k, v in setting.items() if v is not None}
    dumped = yaml.safe_dump(
        meta,
        allow_unicode=True,
        default_flow_style=False,
        sort_keys=False,
    )
    parts = [f"---\n{dumped}---\n"]
    if title:
        parts.append(f"# {title}\n")
    if content:
        parts.append(content.rstrip("\n") + "\n")
    return "\n".join(parts)


def read_preset(directory: Path) -> Any | None:
    """Return the preset stored beside a README, or ``None`` if there is none."""

    path = directory / PRESET_FILENAME
    if not path.is_file():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FilesystemError(f"Invalid preset {path}: {e}") from e
