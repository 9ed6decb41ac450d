from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from .errors import ManifestError


class Group(str, Enum):
    CORE = "core"
    EXTENSIONS = "extensions"


@dataclass(frozen=True)
class ComponentRecord:
    group: Group
    name: str
    readme: str  # relative to the group's source tree
    output: str  # relative to source/
    preview: bool | None = None

    @property
    def preview_enabled(self) -> bool:
        return True if self.preview is None else bool(self.preview)


@dataclass(frozen=True)
class Manifest:
    core: tuple[ComponentRecord, ...]
    extensions: tuple[ComponentRecord, ...]

    def for_group(self, group: Group) -> tuple[ComponentRecord, ...]:
        return self.core if group is Group.CORE else self.extensions


def _core(name: str, *, preview: bool | None = None) -> ComponentRecord:
    return ComponentRecord(
        group=Group.CORE,
        name=name,
        readme=f"src/components/{name}/README.md",
        output=f"components/builtin/{name}.md",
        preview=preview,
    )


def _ext(name: str, *, preview: bool | None = None) -> ComponentRecord:
    return ComponentRecord(
        group=Group.EXTENSIONS,
        name=name,
        readme=f"src/{name}/README.md",
        output=f"components/extensions/{name}.md",
        preview=preview,
    )


_CORE_COMPONENTS: tuple[ComponentRecord, ...] = (
    _core("mip-img"),
    _core("mip-carousel"),
    _core("mip-iframe"),
    _core("mip-video"),
    _core("mip-audio"),
    _core("mip-form"),
    _core("mip-link"),
    _core("mip-anim"),
    _core("mip-embed"),
    _core("mip-fixed"),
    _core("mip-pix", preview=False),
)

_EXTENSION_COMPONENTS: tuple[ComponentRecord, ...] = (
    _ext("mip-accordion"),
    _ext("mip-ad"),
    _ext("mip-gototop"),
    _ext("mip-history"),
    _ext("mip-lightbox"),
    _ext("mip-map"),
    _ext("mip-share"),
    _ext("mip-showmore"),
    _ext("mip-sidebar"),
    _ext("mip-vd-tabs"),
    _ext("mip-stats-baidu", preview=False),
    _ext("mip-stats-cnzz", preview=False),
)


def get_core() -> list[ComponentRecord]:
    return list(_CORE_COMPONENTS)


def get_extensions() -> list[ComponentRecord]:
    return list(_EXTENSION_COMPONENTS)


def default_manifest() -> Manifest:
    return Manifest(core=_CORE_COMPONENTS, extensions=_EXTENSION_COMPONENTS)


def validate_unique(records: Iterable[ComponentRecord]) -> None:
    """Raise ``ManifestError`` if two records of one group share a name."""

    seen: set[tuple[Group, str]] = set()
    for record in records:
        key = (record.group, record.name)
        if key in seen:
            raise ManifestError(
                f"Duplicate component name in {record.group.value}: {record.name}"
            )
        seen.add(key)


def _record_from_entry(group: Group, entry: Any, *, index: int) -> ComponentRecord:
    if not isinstance(entry, dict):
        raise ManifestError(f"{group.value}[{index}] must be an object")

    fields: dict[str, str] = {}
    for key in ("name", "readme", "output"):
        value = entry.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ManifestError(f"{group.value}[{index}] is missing '{key}'")
        fields[key] = value.strip()

    preview = entry.get("preview")
    if preview is not None and not isinstance(preview, bool):
        raise ManifestError(f"{group.value}[{index}].preview must be a boolean")

    return ComponentRecord(group=group, preview=preview, **fields)


def load_manifest(path: Path) -> Manifest:
    """Load a JSON manifest with ``core`` and ``extensions`` record lists."""

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestError(f"Invalid manifest {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must be a JSON object")

    unknown = set(data) - {g.value for g in Group}
    if unknown:
        raise ManifestError(f"Unknown manifest groups: {', '.join(sorted(unknown))}")

    groups: dict[Group, tuple[ComponentRecord, ...]] = {}
    for group in Group:
        entries = data.get(group.value, [])
        if not isinstance(entries, list):
            raise ManifestError(f"'{group.value}' must be a list")
        records = tuple(
            _record_from_entry(group, entry, index=i)
            for i, entry in enumerate(entries)
        )
        validate_unique(records)
        groups[group] = records

    return Manifest(core=groups[Group.CORE], extensions=groups[Group.EXTENSIONS])
