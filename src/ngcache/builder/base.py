"""Template file and generated artifact definitions."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path, PurePosixPath


class BuildError(Exception):
    """Base exception for cache loader build errors."""


class NoTemplatesFoundError(BuildError):
    """Raised when no template files were found for a directive."""

    def __init__(self, message: str = "No template files found.") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class TemplateFile:
    """A template discovered in a source folder.

    ``template_id`` is the URL the template is registered under in
    ``$templateCache``.
    """

    path: Path
    template_id: str
    contents: str

    def with_contents(self, contents: str) -> TemplateFile:
        """Return a copy with new contents and the same template ID."""
        return replace(self, contents=contents)


@dataclass(frozen=True)
class GeneratedArtifact:
    """A generated cache loader script."""

    root: Path
    path: PurePosixPath  # Relative to root
    contents: bytes

    @property
    def absolute_path(self) -> Path:
        return self.root / self.path

    def text(self, encoding: str = "utf-8") -> str:
        return self.contents.decode(encoding)
