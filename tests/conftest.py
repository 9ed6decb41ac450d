from __future__ import annotations

import io
import json
import zipfile
from pathlib import Path

import pytest

from docsync.components import ComponentRecord, Group, Manifest


def readme_text(title: str, body: str, deps: list[str] | None = None) -> str:
    rows = ""
    if deps:
        rows = "\n\n标题|内容\n----|----\n类型|通用\n所需脚本|" + "<br>".join(deps)
    return f"# {title}\n\n{body}{rows}\n"


def write_readme(
    root: Path,
    rel: str,
    *,
    title: str,
    body: str = "Body text.",
    deps: list[str] | None = None,
    preset: object | None = None,
) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(readme_text(title, body, deps), encoding="utf-8")
    if preset is not None:
        (path.parent / "preset.json").write_text(json.dumps(preset), encoding="utf-8")
    return path


def core_record(name: str, *, preview: bool | None = None) -> ComponentRecord:
    return ComponentRecord(
        group=Group.CORE,
        name=name,
        readme=f"src/components/{name}/README.md",
        output=f"components/builtin/{name}.md",
        preview=preview,
    )


def ext_record(name: str, *, preview: bool | None = None) -> ComponentRecord:
    return ComponentRecord(
        group=Group.EXTENSIONS,
        name=name,
        readme=f"src/{name}/README.md",
        output=f"components/extensions/{name}.md",
        preview=preview,
    )


def zip_tree(root: Path, *, prefix: str) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        archive.writestr(f"{prefix}/", "")
        for path in sorted(root.rglob("*")):
            if path.is_file():
                archive.write(path, f"{prefix}/{path.relative_to(root).as_posix()}")
    return buf.getvalue()


class FakeHttp:
    """Stands in for ``HttpClient``; serves prepared archive bytes per URL."""

    def __init__(self, archives: dict[str, bytes]) -> None:
        self.archives = archives
        self.requested: list[str] = []

    def download(self, url: str, target: Path) -> Path:
        self.requested.append(url)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.archives[url])
        return target


@pytest.fixture
def core_repo(tmp_path: Path) -> Path:
    root = tmp_path / "mip"
    write_readme(
        root,
        "src/components/mip-img/README.md",
        title="mip-img 图片",
        body="图片用于展示大图。",
        deps=["https://c.mipcdn.com/static/v1/mip-img/mip-img.js"],
        preset={"width": 320},
    )
    write_readme(
        root,
        "src/components/mip-pix/README.md",
        title="mip-pix 统计",
        body="统计打点。",
    )
    (root / "node_modules" / "left-pad").mkdir(parents=True)
    (root / "node_modules" / "left-pad" / "README.md").write_text("x")
    return root


@pytest.fixture
def extensions_repo(tmp_path: Path) -> Path:
    root = tmp_path / "mip-extensions"
    write_readme(
        root,
        "src/mip-share/README.md",
        title="mip-share 分享",
        body="分享到社交平台。",
        deps=["https://c.mipcdn.com/static/v1/mip-share/mip-share.js"],
    )
    return root


@pytest.fixture
def small_manifest() -> Manifest:
    return Manifest(
        core=(core_record("mip-img"), core_record("mip-pix", preview=False)),
        extensions=(ext_record("mip-share"),),
    )
