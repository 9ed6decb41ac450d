from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .components import ComponentRecord, Group, Manifest, default_manifest

CORE_ARCHIVE_URL = "https://github.com/mipengine/mip/archive/master.zip"
EXTENSIONS_ARCHIVE_URL = (
    "https://github.com/mipengine/mip-extensions/archive/master.zip"
)

_GROUP_SOURCES: dict[Group, tuple[str, str]] = {
    Group.CORE: (CORE_ARCHIVE_URL, "mip-master"),
    Group.EXTENSIONS: (EXTENSIONS_ARCHIVE_URL, "mip-extensions-master"),
}


@dataclass(frozen=True)
class GroupSpec:
    group: Group
    components: tuple[ComponentRecord, ...]
    remote_url: str
    work_dir_name: str

    @property
    def archive_name(self) -> str:
        return f"{self.work_dir_name}.zip"


@dataclass
class SyncConfig:
    base_dir: Path
    manifest: Manifest = field(default_factory=default_manifest)
    timeout_s: int = 45
    progress: bool = True

    def __post_init__(self) -> None:
        self.base_dir = Path(self.base_dir).resolve()
        self.tools_dir = self.base_dir / "tools"
        self.source_dir = self.base_dir / "source"
        self.examples_dir = self.source_dir / "examples"

    def group_spec(self, group: Group) -> GroupSpec:
        remote_url, work_dir_name = _GROUP_SOURCES[group]
        return GroupSpec(
            group=group,
            components=self.manifest.for_group(group),
            remote_url=remote_url,
            work_dir_name=work_dir_name,
        )

    def work_dir(self, spec: GroupSpec) -> Path:
        return self.tools_dir / spec.work_dir_name

    def archive_path(self, spec: GroupSpec) -> Path:
        return self.tools_dir / spec.archive_name

    def temp_paths(self) -> list[Path]:
        paths: list[Path] = []
        for group in (Group.EXTENSIONS, Group.CORE):
            spec = self.group_spec(group)
            paths.extend([self.archive_path(spec), self.work_dir(spec)])
        return paths
