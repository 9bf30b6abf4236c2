"""Resolution of directive source and target paths.

A declared path with a leading slash is anchored at the project root, any
other path is relative to the folder of the document that declares it. All
results are POSIX paths relative to the project root. Resolution is purely
syntactic; nothing here touches the file system.
"""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

ROOT_ANCHOR = "/"


@dataclass(frozen=True)
class ResolvedPath:
    """A root-relative path and how it was anchored."""

    path: PurePosixPath
    from_root: bool


def document_dir(document_path: Path, root: Path) -> PurePosixPath:
    """Get the folder containing a document, relative to the project root."""
    relative = os.path.relpath(document_path, root)
    folder = posixpath.dirname(relative.replace(os.sep, "/"))
    return PurePosixPath(posixpath.normpath(folder or "."))


def _resolve(doc_dir: PurePosixPath, declared: str) -> ResolvedPath:
    from_root = declared.startswith(ROOT_ANCHOR)
    if from_root:
        joined = declared.lstrip(ROOT_ANCHOR)
    else:
        joined = posixpath.join(str(doc_dir), declared)
    return ResolvedPath(PurePosixPath(posixpath.normpath(joined or ".")), from_root)


def resolve_directory(doc_dir: PurePosixPath, declared: str) -> ResolvedPath:
    """Resolve a declared ``source`` folder.

    Args:
        doc_dir: Document folder relative to the root (see document_dir).
        declared: Folder as written in the directive.
    """
    return _resolve(doc_dir, declared)


def resolve_target(doc_dir: PurePosixPath, declared: str) -> PurePosixPath:
    """Resolve a declared ``target`` file path."""
    return _resolve(doc_dir, declared).path
