"""Template file discovery in source folders."""

from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path

from ngcache.builder.base import TemplateFile
from ngcache.paths import ResolvedPath

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_FILTER = "**/*.template.html"


def _relative_posix(path: Path, root: Path) -> str:
    return os.path.relpath(path, root).replace(os.sep, "/")


def matches_filter(relative: str, pattern: str) -> bool:
    """Check a root-relative POSIX path against a glob pattern.

    Uses fnmatch, where ``*`` also matches ``/``. A leading ``**/`` matches
    zero or more folders, so ``**/*.html`` matches ``index.html``.
    """
    if fnmatch.fnmatchcase(relative, pattern):
        return True
    if pattern.startswith("**/"):
        return matches_filter(relative, pattern[3:])
    return False


def enumerate_files(root: Path, directory: ResolvedPath, pattern: str) -> list[Path]:
    """List files below a source folder that match the source filter.

    Hidden files and folders are skipped. A missing folder yields no files.

    Args:
        root: Project root.
        directory: Source folder relative to the root.
        pattern: Glob matched against each file's root-relative path.

    Returns:
        Matching file paths, sorted.
    """
    base = root / directory.path
    if not base.is_dir():
        logger.debug("Source folder not found: %s", base)
        return []

    files: list[Path] = []
    for path in sorted(base.rglob("*")):
        if not path.is_file():
            continue
        if any(part.startswith(".") for part in path.relative_to(base).parts):
            continue
        if matches_filter(_relative_posix(path, root), pattern):
            files.append(path)

    logger.debug("Found %d template(s) in %s", len(files), base)
    return files


def template_id_for(path: Path, root: Path, from_root: bool) -> str:
    """Build the cache URL for a template file.

    Templates from root-anchored folders get an absolute URL ("/app/x.html"),
    others a relative one ("app/x.html").
    """
    relative = _relative_posix(path, root)
    return f"/{relative}" if from_root else relative


def collect_templates(
    root: Path,
    directory: ResolvedPath,
    pattern: str = DEFAULT_SOURCE_FILTER,
    encoding: str = "utf-8",
) -> list[TemplateFile]:
    """Load the templates of one source folder with their template IDs."""
    return [
        TemplateFile(
            path=path,
            template_id=template_id_for(path, root, directory.from_root),
            contents=path.read_text(encoding=encoding),
        )
        for path in enumerate_files(root, directory, pattern)
    ]
