"""Tests for the CLI."""

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from ngcache import __version__
from ngcache.cli import main

PAGE = (
    "<html>\n"
    '  <!-- templates:build module="App" source="widgets" target="tpl.js" -->\n'
    "</html>\n"
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path):
    """Keep the user's global config out of the tests."""
    with patch(
        "ngcache.config.loader.get_home_config_path",
        return_value=tmp_path / "home" / ".ngcache" / "config.yaml",
    ):
        yield


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a project with one page and two templates."""
    root = tmp_path / "site"
    (root / "app" / "widgets").mkdir(parents=True)
    (root / "app" / "index.html").write_text(PAGE, encoding="utf-8")
    (root / "app" / "widgets" / "a.template.html").write_text("<p>A</p>", encoding="utf-8")
    (root / "app" / "widgets" / "b.template.html").write_text("<p>B</p>", encoding="utf-8")
    return root


def test_cli_help() -> None:
    """Test that --help exits cleanly."""
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "ngcache" in result.output.lower()


def test_cli_version() -> None:
    """Test that --version shows the version."""
    runner = CliRunner()
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_build_writes_outputs(project: Path) -> None:
    """Test that build writes the loader and rewrites the page."""
    runner = CliRunner()
    result = runner.invoke(main, ["build", "--root", str(project), "--eol", "lf"])

    assert result.exit_code == 0, result.output
    loader = project / "app" / "tpl.js"
    assert loader.exists()
    text = loader.read_text(encoding="utf-8")
    assert '$templateCache.put("app/widgets/a.template.html","<p>A</p>");' in text
    assert 'src="tpl.js"' in (project / "app" / "index.html").read_text(encoding="utf-8")
    assert "Created" in result.output


def test_build_dry_run(project: Path) -> None:
    """Test that --dry-run writes nothing."""
    runner = CliRunner()
    result = runner.invoke(main, ["build", "--root", str(project), "--dry-run"])

    assert result.exit_code == 0, result.output
    assert not (project / "app" / "tpl.js").exists()
    assert (project / "app" / "index.html").read_text(encoding="utf-8") == PAGE


def test_build_failure_exit_code(project: Path) -> None:
    """Test that a failing document sets exit code 1."""
    (project / "app" / "index.html").write_text(
        '<!-- templates:build source="widgets" -->', encoding="utf-8"
    )
    runner = CliRunner()
    result = runner.invoke(main, ["build", "--root", str(project)])

    assert result.exit_code == 1
    assert "module" in result.output


def _add_second_page(project: Path) -> Path:
    (project / "b" / "widgets").mkdir(parents=True)
    (project / "b" / "page.html").write_text(PAGE, encoding="utf-8")
    (project / "b" / "widgets" / "c.template.html").write_text("<p>C</p>", encoding="utf-8")
    return project / "b" / "tpl.js"


def test_build_write_failure_continues(project: Path) -> None:
    """Test that a loader write error fails one document and leaves its page alone."""
    (project / "app" / "tpl.js").mkdir()
    other_loader = _add_second_page(project)

    runner = CliRunner()
    result = runner.invoke(main, ["build", "--root", str(project)])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert (project / "app" / "index.html").read_text(encoding="utf-8") == PAGE
    assert other_loader.exists()
    assert 'src="tpl.js"' in (project / "b" / "page.html").read_text(encoding="utf-8")
    assert "1 of 2 document(s) failed" in result.output


def test_build_unreadable_document_continues(project: Path) -> None:
    """Test that an undecodable page does not stop the other documents."""
    (project / "aaa.html").write_bytes(b"\xff\xfe templates:build")

    runner = CliRunner()
    result = runner.invoke(main, ["build", "--root", str(project)])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert (project / "app" / "tpl.js").exists()
    assert "1 of 2 document(s) failed" in result.output


def test_build_unknown_transform(project: Path) -> None:
    """Test that an unknown transform is a usage error."""
    runner = CliRunner()
    result = runner.invoke(main, ["build", "--root", str(project), "--transform", "nope"])

    assert result.exit_code == 2
    assert "Unknown transform" in result.output


def test_build_no_documents(tmp_path: Path) -> None:
    """Test build with no HTML documents."""
    empty = tmp_path / "empty"
    empty.mkdir()
    runner = CliRunner()
    result = runner.invoke(main, ["build", "--root", str(empty)])

    assert result.exit_code == 0
    assert "No HTML documents found" in result.output


def test_inspect(project: Path) -> None:
    """Test that inspect lists directives without building."""
    runner = CliRunner()
    result = runner.invoke(main, ["inspect", "--root", str(project)])

    assert result.exit_code == 0, result.output
    assert "App" in result.output
    assert not (project / "app" / "tpl.js").exists()


def test_inspect_reports_bad_pages(project: Path) -> None:
    """Test that inspect lists unreadable and malformed pages instead of crashing."""
    (project / "app" / "open.html").write_text(
        '<!-- templates:build module="A"', encoding="utf-8"
    )
    (project / "aaa.html").write_bytes(b"\xff\xfe templates:build")

    runner = CliRunner()
    result = runner.invoke(main, ["inspect", "--root", str(project)])

    assert result.exit_code == 0, result.output
    assert result.exception is None
    assert "templates:build blocks" in result.output


def test_package_exports_errors() -> None:
    """Test that the error hierarchy is importable from the package."""
    import ngcache
    from ngcache.builder import BuildError
    from ngcache.directives import DirectiveError

    assert ngcache.DirectiveError is DirectiveError
    assert ngcache.BuildError is BuildError
    assert issubclass(ngcache.MissingModuleError, ngcache.DirectiveError)
    assert issubclass(ngcache.NoTemplatesFoundError, ngcache.BuildError)


def test_init_and_config(project: Path) -> None:
    """Test that init writes a config that config then reports."""
    runner = CliRunner()
    result = runner.invoke(main, ["init", "--root", str(project)])

    assert result.exit_code == 0, result.output
    assert (project / ".ngcache" / "config.yaml").exists()

    result = runner.invoke(main, ["config", "--root", str(project)])
    assert result.exit_code == 0
    assert "file_name: templates.js" in result.output
    assert "Local config: exists" in result.output


def test_init_does_not_overwrite(project: Path) -> None:
    """Test that init keeps an existing config without --force."""
    config_path = project / ".ngcache" / "config.yaml"
    config_path.parent.mkdir()
    config_path.write_text("file_name: mine.js\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(main, ["init", "--root", str(project)])

    assert result.exit_code == 0
    assert "already exists" in result.output
    assert config_path.read_text(encoding="utf-8") == "file_name: mine.js\n"
