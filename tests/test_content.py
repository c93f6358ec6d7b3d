from datetime import datetime
from pathlib import Path

import pytest

from pagewright.content import (
    ContentIndex,
    DocumentBuilder,
    FileContentLoader,
    Frontmatter,
    SiteMetadata,
    document_id,
)
from pagewright.extractors import FrontmatterError


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def create_content(tmp_path: Path) -> Path:
    content = tmp_path / "content"
    write(
        content / "post-a" / "index.mdx",
        "---\npath: /post-a\ntitle: Post A\ndate: 2024-03-01\n---\n\nBody A\n",
    )
    write(
        content / "post-a" / "part2.mdx",
        "---\ntitle: Part Two\ndate: 2024-03-01\n---\n\nMore A\n",
    )
    write(
        content / "post-b" / "index.md",
        "---\npath: /post-b\ntitle: Post B\ndate: 2024-05-10\ndescription: Newer\n---\n\nBody B\n",
    )
    write(content / "notes.md", "# No frontmatter\n")
    write(content / "_drafts" / "draft.mdx", "---\npath: /draft\n---\n")
    write(content / "post-b" / "photo.png", "not really a png")
    return content


def test_loader_finds_markdown_and_mdx_only(tmp_path):
    content = create_content(tmp_path)
    files = [p.relative_to(content).as_posix() for p in FileContentLoader(content).iter_files()]
    assert files == ["notes.md", "post-a/index.mdx", "post-a/part2.mdx", "post-b/index.md"]


def test_builder_reads_frontmatter(tmp_path):
    content = create_content(tmp_path)
    document = DocumentBuilder(content).build(content / "post-b" / "index.md")
    assert document.frontmatter.path == "/post-b"
    assert document.frontmatter.title == "Post B"
    assert document.frontmatter.date == datetime(2024, 5, 10)
    assert document.frontmatter.description == "Newer"
    assert document.body.strip() == "Body B"
    assert document.file_absolute_path == str((content / "post-b" / "index.md").resolve())
    assert document.id == document_id(Path("post-b/index.md"))


def test_builder_falls_back_to_folder_title(tmp_path):
    content = create_content(tmp_path)
    write(content / "my-trip" / "index.mdx", "---\npath: /trip\n---\nHi\n")
    document = DocumentBuilder(content).build(content / "my-trip" / "index.mdx")
    assert document.frontmatter.title == "My Trip"


def test_document_ids_are_stable(tmp_path):
    assert document_id(Path("a/index.mdx")) == document_id(Path("a/index.mdx"))
    assert document_id(Path("a/index.mdx")) != document_id(Path("b/index.mdx"))


def test_frontmatter_extra_keys_and_image():
    frontmatter = Frontmatter.from_mapping(
        {"path": "/x", "title": "X", "image": "cover.png", "tags": ["a"]}
    )
    assert frontmatter.image == "cover.png"
    assert frontmatter.extra == {"tags": ["a"]}
    assert frontmatter.date is None


def test_frontmatter_bad_date_raises():
    with pytest.raises(FrontmatterError):
        Frontmatter.from_mapping({"date": "sometime"})


def test_query_sorts_newest_first_and_limits(tmp_path):
    content = create_content(tmp_path)
    index = ContentIndex(content, SiteMetadata(root_url="https://example.com"))
    result = index.query()
    paths = [d.file_absolute_path for d in result.documents]
    assert paths[0].endswith("post-b/index.md")
    assert paths[1].endswith("post-a/index.mdx")
    assert paths[2].endswith("post-a/part2.mdx")
    # undated documents sort last
    assert paths[3].endswith("notes.md")
    assert result.errors == []
    assert result.site.root_url == "https://example.com"

    limited = index.query(limit=2)
    assert len(limited.documents) == 2


def test_index_is_callable_query(tmp_path):
    content = create_content(tmp_path)
    index = ContentIndex(content)
    assert len(index().documents) == 4


def test_index_reports_errors_instead_of_raising(tmp_path):
    content = create_content(tmp_path)
    write(content / "broken" / "index.mdx", "---\npath: [unclosed\n---\nBody\n")
    write(content / "bad-date" / "index.mdx", "---\npath: /bad\ndate: soon\n---\n")
    write(content / "listy" / "index.mdx", "---\n- a\n- b\n---\n")
    index = ContentIndex(content)
    result = index.query()
    assert len(result.documents) == 4
    assert len(result.errors) == 3
    assert any(e.startswith("broken/index.mdx:") for e in result.errors)
    assert any(e.startswith("bad-date/index.mdx:") for e in result.errors)
    assert any("mapping" in e for e in result.errors)


def test_find_by_path(tmp_path):
    content = create_content(tmp_path)
    index = ContentIndex(content)
    assert index.find_by_path("/post-a").frontmatter.title == "Post A"
    assert index.find_by_path("/missing") is None


def test_missing_content_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        ContentIndex(tmp_path / "nope").query()
