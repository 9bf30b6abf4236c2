"""Progress and failure reporting for processed documents."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from ngcache.console import console as default_console

if TYPE_CHECKING:
    from ngcache.builder.base import GeneratedArtifact
    from ngcache.pipeline import Document, PipelineResult

logger = logging.getLogger(__name__)


def _display_path(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


class Reporter:
    """Prints per-document notices to the console.

    Success notices are suppressed when `quiet` is set; failures are always
    printed and logged.
    """

    def __init__(self, quiet: bool = False, console: Console | None = None) -> None:
        self.quiet = quiet
        self._console = console or default_console

    def created(self, artifact: GeneratedArtifact) -> None:
        """Report a generated cache loader script."""
        logger.debug("Created %s", artifact.absolute_path)
        if not self.quiet:
            path = _display_path(artifact.absolute_path, artifact.root)
            self._console.print(f"Created [magenta]{escape(path)}[/magenta].")

    def updated(self, document: Document) -> None:
        """Report a rewritten document."""
        logger.debug("Updated %s", document.path)
        if not self.quiet:
            self._console.print(
                f"Updated [magenta]{escape(document.relative_path)}[/magenta]."
            )

    def failed(self, document: Document, error: BaseException) -> None:
        """Report a document that could not be processed."""
        logger.error("%s: %s", document.path, error)
        self._console.print(
            f"[magenta]{escape(document.relative_path)}[/magenta]: "
            f"[red]{escape(str(error))}[/red]"
        )

    def summary(self, results: Sequence[PipelineResult]) -> None:
        """Report totals for a batch."""
        built = sum(1 for r in results if r.artifact is not None)
        failed = sum(1 for r in results if r.error is not None)
        if failed:
            self._console.print(
                f"[red]✗[/red] {failed} of {len(results)} document(s) failed, "
                f"{built} cache loader(s) built"
            )
        elif not self.quiet:
            self._console.print(
                f"[green]✓[/green] {len(results)} document(s) processed, "
                f"{built} cache loader(s) built"
            )
