"""Builds the cache loader script declared by a directive."""

from __future__ import annotations

import logging
import posixpath
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from ngcache.builder.base import GeneratedArtifact, NoTemplatesFoundError, TemplateFile
from ngcache.builder.collector import DEFAULT_SOURCE_FILTER, collect_templates
from ngcache.builder.compiler import MODULE_FOOTER, compile_template_cache, module_header
from ngcache.builder.eol import normalize_eol, resolve_eol
from ngcache.directives import Directive
from ngcache.paths import document_dir, resolve_directory, resolve_target

if TYPE_CHECKING:
    from ngcache.config.schema import NgCacheConfig
    from ngcache.transforms import TransformFactory

logger = logging.getLogger(__name__)


def _template_key(template: TemplateFile) -> str:
    return template.template_id


class ArtifactBuilder:
    """Builds ``$templateCache`` loader scripts for parsed directives.

    Holds only read-only configuration, so one builder can serve several
    documents at once.
    """

    def __init__(
        self,
        config: NgCacheConfig,
        transform: TransformFactory | None = None,
    ) -> None:
        """Initialize with resolved configuration and an optional transform."""
        self._config = config
        self._transform = transform
        self._eol = resolve_eol(config.eol)

    def target_path(self, document_path: Path, root: Path, directive: Directive) -> PurePosixPath:
        """Get the root-relative path of the script a directive produces."""
        return resolve_target(document_dir(document_path, root), directive.target)

    def gather(self, document_path: Path, root: Path, directive: Directive) -> list[TemplateFile]:
        """Collect templates from every source folder of a directive.

        Source folders are scanned concurrently and their results merged.
        """
        doc_dir = document_dir(document_path, root)
        folders = [resolve_directory(doc_dir, source) for source in directive.sources]
        pattern = self._config.source_filter or DEFAULT_SOURCE_FILTER

        with ThreadPoolExecutor(max_workers=len(folders)) as pool:
            futures = [
                pool.submit(collect_templates, root, folder, pattern)
                for folder in folders
            ]
            templates = [t for future in futures for t in future.result()]

        logger.debug(
            "Collected %d template(s) from %d folder(s)", len(templates), len(folders)
        )
        return templates

    def build(self, document_path: Path, root: Path, directive: Directive) -> GeneratedArtifact:
        """Build the cache loader script for a directive.

        Args:
            document_path: Path of the HTML document declaring the directive.
            root: Project root that root-anchored paths resolve against.
            directive: Parsed directive.

        Returns:
            The generated script, located at the resolved target path.

        Raises:
            NoTemplatesFoundError: If no templates reach the compiler.
            OSError: If a source folder or template cannot be read.
        """
        target = self.target_path(document_path, root, directive)
        templates = self.gather(document_path, root, directive)

        if self._transform is not None:
            templates = list(self._transform()(templates))

        compiled = compile_template_cache(
            templates,
            posixpath.basename(str(target)),
            key=_template_key,
            header=module_header(directive.module),
            footer=MODULE_FOOTER,
        )
        if compiled is None:
            raise NoTemplatesFoundError()

        contents = normalize_eol(compiled.contents, self._eol)
        logger.debug("Built %s for module %s", target, directive.module)

        return GeneratedArtifact(
            root=root,
            path=target,
            contents=contents.encode("utf-8"),
        )
