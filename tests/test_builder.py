"""Tests for template collection, compilation and cache loader building."""

from pathlib import Path, PurePosixPath

import pytest

from ngcache.builder import (
    ArtifactBuilder,
    NoTemplatesFoundError,
    TemplateFile,
    collect_templates,
    compile_template_cache,
    enumerate_files,
    matches_filter,
    normalize_eol,
    resolve_eol,
)
from ngcache.builder.compiler import escape_js_string, module_header
from ngcache.config import DEFAULT_CONFIG, NgCacheConfig
from ngcache.directives import Directive
from ngcache.paths import ResolvedPath

HEADER = 'angular.module("App").run(["$templateCache", function($templateCache) {\n'
FOOTER = "\n}]);"


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a project with a page and two widget templates."""
    _write(tmp_path / "app" / "index.html", "<html></html>")
    _write(tmp_path / "app" / "widgets" / "a.template.html", "<p>A</p>")
    _write(tmp_path / "app" / "widgets" / "b.template.html", "<p>B</p>")
    _write(tmp_path / "app" / "widgets" / "notes.txt", "ignored")
    _write(tmp_path / "shared" / "c.template.html", "<p>C</p>")
    return tmp_path


@pytest.fixture
def builder() -> ArtifactBuilder:
    """Create a builder that writes LF line endings."""
    return ArtifactBuilder(DEFAULT_CONFIG.merge(NgCacheConfig(eol="lf")))


class TestMatchesFilter:
    """Tests for source filter matching."""

    @pytest.mark.parametrize(
        ("relative", "expected"),
        [
            ("app/widgets/a.template.html", True),
            ("a.template.html", True),
            ("app/a.html", False),
            ("app/a.template.html.bak", False),
        ],
    )
    def test_default_pattern(self, relative: str, expected: bool) -> None:
        """Test the default template pattern."""
        assert matches_filter(relative, "**/*.template.html") is expected

    def test_folder_pattern(self) -> None:
        """Test a pattern restricted to a folder."""
        assert matches_filter("app/views/x.html", "app/views/*.html")
        assert not matches_filter("lib/views/x.html", "app/views/*.html")


class TestCollector:
    """Tests for template enumeration."""

    def test_enumerate_files(self, project: Path) -> None:
        """Test that only matching files are listed, sorted."""
        folder = ResolvedPath(PurePosixPath("app/widgets"), False)
        files = enumerate_files(project, folder, "**/*.template.html")

        assert [f.name for f in files] == ["a.template.html", "b.template.html"]

    def test_enumerate_skips_hidden(self, project: Path) -> None:
        """Test that hidden folders are skipped."""
        _write(project / "app" / "widgets" / ".cache" / "d.template.html", "x")
        folder = ResolvedPath(PurePosixPath("app/widgets"), False)

        files = enumerate_files(project, folder, "**/*.template.html")
        assert len(files) == 2

    def test_enumerate_missing_folder(self, project: Path) -> None:
        """Test that a missing folder yields nothing."""
        folder = ResolvedPath(PurePosixPath("nope"), False)
        assert enumerate_files(project, folder, "**/*.html") == []

    def test_collect_relative_ids(self, project: Path) -> None:
        """Test template IDs from a relative source folder."""
        folder = ResolvedPath(PurePosixPath("app/widgets"), False)
        templates = collect_templates(project, folder)

        assert [t.template_id for t in templates] == [
            "app/widgets/a.template.html",
            "app/widgets/b.template.html",
        ]
        assert templates[0].contents == "<p>A</p>"

    def test_collect_rooted_ids(self, project: Path) -> None:
        """Test template IDs from a root-anchored source folder."""
        folder = ResolvedPath(PurePosixPath("app/widgets"), True)
        templates = collect_templates(project, folder)

        assert [t.template_id for t in templates] == [
            "/app/widgets/a.template.html",
            "/app/widgets/b.template.html",
        ]


class TestCompiler:
    """Tests for the template cache compiler."""

    def test_escape_js_string(self) -> None:
        """Test escaping of quotes, backslashes and line breaks."""
        assert escape_js_string('say "hi"\n') == 'say \\"hi\\"\\n'
        assert escape_js_string("it's a\\b\r") == "it\\'s a\\\\b\\r"
        assert escape_js_string("\u2028\u2029") == "\\u2028\\u2029"

    def test_module_header(self) -> None:
        """Test the module run block header."""
        assert module_header("App") == HEADER

    def test_compile_sorted(self) -> None:
        """Test that registrations are sorted by key and wrapped."""
        templates = [
            TemplateFile(Path("b"), "b.html", "<p>B</p>"),
            TemplateFile(Path("a"), "a.html", '<p class="x">A</p>\n'),
        ]
        compiled = compile_template_cache(
            templates, "tpl.js", header=HEADER, footer=FOOTER
        )

        assert compiled is not None
        assert compiled.file_name == "tpl.js"
        assert compiled.contents == (
            HEADER
            + '$templateCache.put("a.html","<p class=\\"x\\">A</p>\\n");\n'
            + '$templateCache.put("b.html","<p>B</p>");'
            + FOOTER
        )

    def test_compile_custom_key(self) -> None:
        """Test that the key accessor controls the registration URL."""
        templates = [TemplateFile(Path("a"), "a.html", "A")]
        compiled = compile_template_cache(templates, "t.js", key=lambda t: "/x/" + t.template_id)

        assert compiled is not None
        assert compiled.contents == '$templateCache.put("/x/a.html","A");'

    def test_compile_empty(self) -> None:
        """Test that empty input is signalled with None."""
        assert compile_template_cache([], "tpl.js") is None


class TestEol:
    """Tests for line ending normalization."""

    def test_normalize(self) -> None:
        """Test that all line endings are converted."""
        assert normalize_eol("a\r\nb\rc\n", "\n") == "a\nb\nc\n"
        assert normalize_eol("a\nb", "\r\n") == "a\r\nb"

    def test_no_trailing_newline_added(self) -> None:
        """Test that no newline is appended."""
        assert normalize_eol("abc", "\r\n") == "abc"

    def test_resolve_eol(self) -> None:
        """Test EOL style names."""
        assert resolve_eol("lf") == "\n"
        assert resolve_eol("CRLF") == "\r\n"

    def test_resolve_eol_unknown(self) -> None:
        """Test that unknown styles are rejected."""
        with pytest.raises(ValueError, match="Unknown EOL style"):
            resolve_eol("mac")


class TestArtifactBuilder:
    """Tests for ArtifactBuilder."""

    def test_build_relative_source(self, project: Path, builder: ArtifactBuilder) -> None:
        """Test building from a source folder relative to the page."""
        directive = Directive(module="App", sources=("widgets",), target="tpl.js")
        artifact = builder.build(project / "app" / "index.html", project, directive)

        assert artifact.path == PurePosixPath("app/tpl.js")
        assert artifact.absolute_path == project / "app" / "tpl.js"
        assert artifact.text() == (
            HEADER
            + '$templateCache.put("app/widgets/a.template.html","<p>A</p>");\n'
            + '$templateCache.put("app/widgets/b.template.html","<p>B</p>");'
            + FOOTER
        )

    def test_build_rooted_source_and_target(
        self, project: Path, builder: ArtifactBuilder
    ) -> None:
        """Test root-anchored source and target."""
        directive = Directive(module="App", sources=("/shared",), target="/js/tpl.js")
        artifact = builder.build(project / "app" / "index.html", project, directive)

        assert artifact.path == PurePosixPath("js/tpl.js")
        assert '$templateCache.put("/shared/c.template.html","<p>C</p>");' in artifact.text()

    def test_build_merges_sources(self, project: Path, builder: ArtifactBuilder) -> None:
        """Test that templates from every source folder are merged."""
        directive = Directive(module="App", sources=("widgets", "/shared"))
        artifact = builder.build(project / "app" / "index.html", project, directive)

        text = artifact.text()
        assert text.count("$templateCache.put(") == 3
        assert '"app/widgets/a.template.html"' in text
        assert '"/shared/c.template.html"' in text

    def test_build_default_source_is_document_folder(
        self, project: Path, builder: ArtifactBuilder
    ) -> None:
        """Test that the default source scans the page's own folder."""
        directive = Directive(module="App")
        artifact = builder.build(project / "app" / "index.html", project, directive)

        assert artifact.path == PurePosixPath("app/templates.js")
        assert artifact.text().count("$templateCache.put(") == 2

    def test_build_no_templates(self, project: Path, builder: ArtifactBuilder) -> None:
        """Test that a build without templates fails."""
        directive = Directive(module="App", sources=("missing",))

        with pytest.raises(NoTemplatesFoundError, match="No template files found."):
            builder.build(project / "app" / "index.html", project, directive)

    def test_build_with_transform(self, project: Path) -> None:
        """Test that the transform sees and filters templates."""

        def drop_b():
            def stage(templates):
                return [t for t in templates if not t.template_id.endswith("b.template.html")]

            return stage

        builder = ArtifactBuilder(DEFAULT_CONFIG, transform=drop_b)
        directive = Directive(module="App", sources=("widgets",))
        artifact = builder.build(project / "app" / "index.html", project, directive)

        assert "a.template.html" in artifact.text()
        assert "b.template.html" not in artifact.text()

    def test_transform_removing_everything(self, project: Path) -> None:
        """Test that a transform dropping every template fails the build."""
        builder = ArtifactBuilder(DEFAULT_CONFIG, transform=lambda: lambda templates: [])
        directive = Directive(module="App", sources=("widgets",))

        with pytest.raises(NoTemplatesFoundError):
            builder.build(project / "app" / "index.html", project, directive)

    def test_build_crlf(self, project: Path) -> None:
        """Test that generated scripts use the configured line endings."""
        builder = ArtifactBuilder(DEFAULT_CONFIG.merge(NgCacheConfig(eol="crlf")))
        directive = Directive(module="App", sources=("widgets",))
        artifact = builder.build(project / "app" / "index.html", project, directive)

        assert b"\r\n" in artifact.contents
        assert b"\n" not in artifact.contents.replace(b"\r\n", b"")

    def test_custom_source_filter(self, project: Path) -> None:
        """Test that the source filter selects templates."""
        config = DEFAULT_CONFIG.merge(NgCacheConfig(source_filter="**/*.txt", eol="lf"))
        directive = Directive(module="App", sources=("widgets",))
        artifact = ArtifactBuilder(config).build(
            project / "app" / "index.html", project, directive
        )

        assert '"app/widgets/notes.txt"' in artifact.text()
