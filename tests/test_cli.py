from datetime import datetime
from pathlib import Path

import pytest
from click.testing import CliRunner

from pagewright import __version__
from pagewright.build import BuildError, BuildResult
from pagewright.cli import _post_template, cli
from pagewright.content import SiteMetadata
from pagewright.pages import PageGenerationError

SKIP_GIT = {"PAGEWRIGHT_SKIP_GIT_INIT": "1"}


def scaffold(tmp_path: Path) -> Path:
    target = tmp_path / "mysite"
    result = CliRunner().invoke(cli, ["new", str(target)], env=SKIP_GIT)
    assert result.exit_code == 0, result.output
    return target


def test_cli_new_scaffolds_project(tmp_path):
    target = scaffold(tmp_path)
    assert (target / "pagewright.yaml").exists()
    assert (target / "content" / "hello-world" / "index.mdx").exists()
    assert (target / "content" / "hello-world" / "appendix.mdx").exists()
    assert (target / "templates").is_dir()
    assert (target / "static").is_dir()

    # fails on non-empty directory
    result = CliRunner().invoke(cli, ["new", str(target)], env=SKIP_GIT)
    assert result.exit_code != 0
    assert "non-empty" in result.output


def test_cli_build_scaffolded_site(tmp_path, monkeypatch):
    target = scaffold(tmp_path)
    monkeypatch.chdir(target)
    result = CliRunner().invoke(cli, ["build"], catch_exceptions=False)
    assert result.exit_code == 0, result.output
    assert "Built 1 pages" in result.output
    html = (target / "public" / "hello-world" / "index.html").read_text(encoding="utf-8")
    assert "Files without a" in html
    assert "https://github.com/you/blog/tree/main/content/hello-world" in html


def test_cli_build_passes_options(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    seen = {}

    def fake_build_site(root, root_url=None, clean_output=True, output_dir_override=None):
        seen["root_url"] = root_url
        seen["output"] = output_dir_override
        return BuildResult(pages=[], output_dir=root / "out", site=SiteMetadata())

    monkeypatch.setattr("pagewright.build.build_site", fake_build_site)
    result = CliRunner().invoke(
        cli, ["build", "--root-url", "https://x.test", "--output", "dist"]
    )
    assert result.exit_code == 0, result.output
    assert seen == {"root_url": "https://x.test", "output": Path("dist")}


def test_cli_build_reports_query_errors(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    def failing_build_site(root, **kwargs):
        raise PageGenerationError(["post/index.mdx: Invalid date: 'soon'"])

    monkeypatch.setattr("pagewright.build.build_site", failing_build_site)
    result = CliRunner().invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert "post/index.mdx: Invalid date" in result.output


def test_cli_build_reports_render_errors(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    def failing_build_site(root, **kwargs):
        raise BuildError(root / "content" / "a" / "index.mdx", "Undefined variable: x")

    monkeypatch.setattr("pagewright.build.build_site", failing_build_site)
    result = CliRunner().invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Undefined variable: x" in result.output
    assert str(Path("content") / "a" / "index.mdx") in result.output


def test_cli_build_without_content(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Expected content directory" in result.output


def test_cli_pages_lists_registrations(tmp_path, monkeypatch):
    target = scaffold(tmp_path)
    monkeypatch.chdir(target)
    result = CliRunner().invoke(cli, ["pages"])
    assert result.exit_code == 0, result.output
    assert "/hello-world -> https://github.com/you/blog/tree/main/content/hello-world" in result.output
    assert "1 pages" in result.output
    assert not (target / "public").exists()


class FakePrompt:
    def __init__(self, answer):
        self.answer = answer

    def ask(self):
        return self.answer


def test_cli_post_creates_mdx(tmp_path, monkeypatch):
    target = scaffold(tmp_path)
    monkeypatch.chdir(target)
    answers = iter(["My Second Post", "my-second-post", "A description"])
    monkeypatch.setattr(
        "pagewright.cli.questionary.text", lambda *a, **kw: FakePrompt(next(answers))
    )
    result = CliRunner().invoke(cli, ["post"])
    assert result.exit_code == 0, result.output
    created = target / "content" / "my-second-post" / "index.mdx"
    text = created.read_text(encoding="utf-8")
    assert "path: /my-second-post" in text
    assert 'title: "My Second Post"' in text
    assert 'description: "A description"' in text

    answers = iter(["Again", "my-second-post", ""])
    result = CliRunner().invoke(cli, ["post"])
    assert result.exit_code != 0
    assert "already exists" in result.output


def test_cli_post_abort(tmp_path, monkeypatch):
    target = scaffold(tmp_path)
    monkeypatch.chdir(target)
    monkeypatch.setattr(
        "pagewright.cli.questionary.text", lambda *a, **kw: FakePrompt(None)
    )
    result = CliRunner().invoke(cli, ["post"])
    assert result.exit_code != 0


def test_post_template_quotes_values():
    text = _post_template('Say "hi"', "say-hi", "")
    assert 'title: "Say \\"hi\\""' in text
    assert f"date: {datetime.now().strftime('%Y-%m-%d')}" in text
    assert "description" not in text


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert __version__ in result.output


def test_module_main_entrypoint():
    from pagewright.__main__ import main

    assert callable(main)


@pytest.mark.parametrize("flag", ["-v", "--verbose"])
def test_verbose_flag_accepted(tmp_path, monkeypatch, flag):
    target = scaffold(tmp_path)
    monkeypatch.chdir(target)
    result = CliRunner().invoke(cli, [flag, "pages"])
    assert result.exit_code == 0, result.output


@pytest.mark.parametrize("command", ["build", "pages", "post"])
def test_cli_reports_invalid_config(tmp_path, monkeypatch, command):
    (tmp_path / "content").mkdir()
    (tmp_path / "pagewright.yaml").write_text("query_limit: lots\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, [command])
    assert result.exit_code == 1
    assert "query_limit must be an integer" in result.output
    assert "Traceback" not in result.output
