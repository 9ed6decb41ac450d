from __future__ import annotations

from pathlib import Path

import pytest

from docsync.errors import DocumentError, FilesystemError
from docsync.markdown import parse_markdown, read_preset, to_markdown

from conftest import readme_text

IMG_JS = "https://c.mipcdn.com/static/v1/mip-img/mip-img.js"
FX_JS = "https://c.mipcdn.com/static/v1/mip-fx/mip-fx.js"


def test_parse_splits_title_and_body():
    doc = parse_markdown("\n# mip-img 图片\n\n\n图片组件。\n\n## 示例\n\ncode\n")

    assert doc.title == "mip-img 图片"
    assert doc.content == "图片组件。\n\n## 示例\n\ncode"
    assert doc.deps == []


def test_parse_reads_deps_from_required_scripts_row():
    text = readme_text("mip-img", "desc", deps=[IMG_JS, FX_JS, IMG_JS])

    doc = parse_markdown(text)

    assert doc.deps == [IMG_JS, FX_JS]


def test_parse_ignores_json_urls_in_scripts_row():
    text = (
        "# mip-ad\n\n"
        "| 所需脚本 | https://c.mipcdn.com/static/v1/mip-ad/mip-ad.js "
        "https://c.mipcdn.com/static/v1/mip-ad/config.json |\n"
    )

    doc = parse_markdown(text)

    assert doc.deps == ["https://c.mipcdn.com/static/v1/mip-ad/mip-ad.js"]


def test_frontmatter_deps_take_precedence():
    text = (
        "---\n"
        "deps:\n"
        "  - mip-fx\n"
        "  - mip-img\n"
        "---\n"
        f"# mip-gallery\n\nRequired script | {IMG_JS}\n"
    )

    doc = parse_markdown(text)

    assert doc.title == "mip-gallery"
    assert doc.deps == ["mip-fx", "mip-img"]
    assert doc.content == f"Required script | {IMG_JS}"


def test_parse_without_heading_keeps_everything_as_body():
    doc = parse_markdown("Just a paragraph.\n\n# Late heading\n")

    assert doc.title == ""
    assert doc.content == "Just a paragraph.\n\n# Late heading"


def test_to_markdown_layout():
    page = to_markdown(
        title="mip-img 图片",
        content="图片组件。",
        setting={
            "deps": [IMG_JS],
            "name": "mip-img",
            "preset": None,
            "preview": True,
        },
    )

    assert page == (
        "---\n"
        "deps:\n"
        f"- {IMG_JS}\n"
        "name: mip-img\n"
        "preview: true\n"
        "---\n"
        "\n"
        "# mip-img 图片\n"
        "\n"
        "图片组件。\n"
    )


def test_synced_page_reparses_to_the_same_document():
    body = "Intro paragraph.\n\n## 属性\n\n### src\n\n说明|图片地址"
    page = to_markdown(
        title="mip-img",
        content=body,
        setting={
            "deps": [IMG_JS, FX_JS],
            "name": "mip-img",
            "preset": {"layout": "responsive"},
            "preview": False,
        },
    )

    doc = parse_markdown(page)

    assert doc.title == "mip-img"
    assert doc.content == body
    assert doc.deps == [IMG_JS, FX_JS]
    assert "preset:\n  layout: responsive\n" in page
    assert "preview: false\n" in page


def test_read_preset(tmp_path: Path):
    assert read_preset(tmp_path) is None

    (tmp_path / "preset.json").write_text('{"height": 240}', encoding="utf-8")
    assert read_preset(tmp_path) == {"height": 240}


def test_read_preset_rejects_invalid_json(tmp_path: Path):
    (tmp_path / "preset.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(FilesystemError, match="preset.json"):
        read_preset(tmp_path)


def test_title_keeps_trailing_hash_that_belongs_to_it():
    assert parse_markdown("# Using C#\n\nbody\n").title == "Using C#"
    assert parse_markdown("# mip-img ##\n\nbody\n").title == "mip-img"


def test_body_whitespace_is_preserved():
    doc = parse_markdown("# mip-img\n\nline one  \nline two  \n\n")
    assert doc.content == "line one  \nline two  "

    untitled = parse_markdown("\n    indented code\n    more code\n")
    assert untitled.title == ""
    assert untitled.content == "    indented code\n    more code"


def test_invalid_frontmatter_raises_document_error():
    with pytest.raises(DocumentError, match="front-matter"):
        parse_markdown("---\nfoo: [\n---\n# t\nbody\n")


@pytest.mark.parametrize("deps", ["5", "{a: 1}"])
def test_non_list_deps_raise_document_error(deps):
    with pytest.raises(DocumentError, match="deps must be"):
        parse_markdown(f"---\ndeps: {deps}\n---\n# t\nbody\n")
