"""Per-document processing: parse the directive, build, rewrite, emit."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ngcache.builder import ArtifactBuilder, GeneratedArtifact, matches_filter
from ngcache.config.schema import DEFAULT_CONFIG, NgCacheConfig
from ngcache.directives import (
    COMMENT_TAG,
    DirectiveError,
    MalformedDirectiveError,
    RewriteOptions,
    detect_newline,
    extract,
    has_directive,
    parse_parameters,
    rewrite,
)
from ngcache.reporting import Reporter
from ngcache.transforms import TransformFactory, load_transforms

logger = logging.getLogger(__name__)


class Stage(Enum):
    """Processing stages of a document."""

    SCANNING = "scanning"
    PARSING = "parsing"
    BUILDING = "building"
    EMITTING = "emitting"
    FAILED = "failed"


@dataclass
class Document:
    """An HTML document being processed.

    ``contents`` is replaced at most once, after its cache loader was built.
    """

    path: Path
    root: Path
    contents: str
    encoding: str = "utf-8"

    @classmethod
    def load(cls, path: Path, root: Path | None = None, encoding: str = "utf-8") -> Document:
        """Read a document from disk. The root defaults to the cwd."""
        root = (root or Path.cwd()).resolve()
        path = path.resolve()
        return cls(
            path=path,
            root=root,
            contents=path.read_text(encoding=encoding),
            encoding=encoding,
        )

    @property
    def relative_path(self) -> str:
        """Document path relative to the root, for display."""
        return os.path.relpath(self.path, self.root).replace(os.sep, "/")


Output = Document | GeneratedArtifact


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of processing one document."""

    document: Document
    state: Stage
    artifact: GeneratedArtifact | None = None
    error: Exception | None = None
    failed_stage: Stage | None = None
    rewritten: bool = False

    @classmethod
    def failure(cls, document: Document, stage: Stage, error: Exception) -> PipelineResult:
        """Create the result of a document that failed at `stage`."""
        return cls(document=document, state=Stage.FAILED, error=error, failed_stage=stage)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def outputs(self) -> list[Output]:
        """Items emitted downstream: the document, then its artifact if any."""
        if self.artifact is None:
            return [self.document]
        return [self.document, self.artifact]


class DocumentPipeline:
    """Processes documents containing ``templates:build`` blocks.

    Failures are scoped to a single document: they are reported and the
    document is emitted exactly as it was received.
    """

    def __init__(
        self,
        config: NgCacheConfig | None = None,
        transform: TransformFactory | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        """Initialize with configuration layered over the defaults.

        Args:
            config: Configuration; unset fields use DEFAULT_CONFIG.
            transform: Transform factory. Defaults to the transforms named
                in the configuration.
            reporter: Notice sink. Defaults to a console reporter.
        """
        self.config = DEFAULT_CONFIG.merge(config) if config else DEFAULT_CONFIG
        if transform is None:
            transform = load_transforms(self.config.transforms or ())
        self._builder = ArtifactBuilder(self.config, transform)
        self._reporter = reporter or Reporter(quiet=bool(self.config.quiet))

    def _rewrite_options(self, target: str, newline: str) -> RewriteOptions:
        return RewriteOptions(
            add_include=bool(self.config.add_include),
            replace_block=bool(self.config.replace_block),
            target_href=target,
            newline=newline,
        )

    def _fail(self, document: Document, stage: Stage, error: Exception) -> PipelineResult:
        self._reporter.failed(document, error)
        return PipelineResult.failure(document, stage, error)

    def process(self, document: Document) -> PipelineResult:
        """Process a single document.

        Documents without the directive tag pass through untouched. The
        rewritten text replaces the document contents only once its cache
        loader was built.
        """
        original = document.contents
        if not has_directive(original):
            logger.debug("No '%s' block in %s", COMMENT_TAG, document.path)
            return PipelineResult(document=document, state=Stage.EMITTING)

        try:
            block = extract(original)
            if block is None:
                raise MalformedDirectiveError(f"'{COMMENT_TAG}' block not in correct format.")
            directive = parse_parameters(block.text, default_target=self.config.file_name)
        except DirectiveError as e:
            return self._fail(document, Stage.PARSING, e)

        options = self._rewrite_options(directive.target, detect_newline(original))
        rewritten = rewrite(original, block, options)

        try:
            artifact = self._builder.build(document.path, document.root, directive)
        except Exception as e:
            logger.debug("Build failed for %s", document.path, exc_info=True)
            return self._fail(document, Stage.BUILDING, e)

        changed = rewritten != original
        document.contents = rewritten

        self._reporter.created(artifact)
        if changed:
            self._reporter.updated(document)

        return PipelineResult(
            document=document,
            state=Stage.EMITTING,
            artifact=artifact,
            rewritten=changed,
        )

    def run(
        self, documents: Iterable[Document], parallel: int | None = None
    ) -> list[PipelineResult]:
        """Process a batch of documents.

        With `parallel` above one, documents are processed concurrently.
        Results are returned in input order.
        """
        docs = list(documents)
        workers = parallel or self.config.parallel or 1
        if workers <= 1 or len(docs) <= 1:
            return [self.process(doc) for doc in docs]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self.process, docs))


def find_documents(paths: Iterable[Path], root: Path, source_filter: str) -> list[Path]:
    """Expand files and folders into the HTML documents to process.

    Folders are searched recursively for ``*.html`` files. Hidden entries
    and files matching the template source filter are skipped, so templates
    are not treated as pages.
    """
    found: list[Path] = []
    seen: set[Path] = set()

    def add(path: Path) -> None:
        resolved = path.resolve()
        if resolved not in seen:
            seen.add(resolved)
            found.append(resolved)

    for path in paths:
        if not path.is_dir():
            add(path)
            continue
        for candidate in sorted(path.rglob("*.html")):
            if any(part.startswith(".") for part in candidate.relative_to(path).parts):
                continue
            relative = os.path.relpath(candidate.resolve(), root).replace(os.sep, "/")
            if matches_filter(relative, source_filter):
                continue
            add(candidate)

    return found
