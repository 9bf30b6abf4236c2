"""Writing processed documents and generated scripts to disk."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ngcache.pipeline import PipelineResult

logger = logging.getLogger(__name__)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write bytes to a file atomically using a temporary file.

    Args:
        path: Destination file path
        data: Content to write
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


def write_result(result: PipelineResult) -> list[Path]:
    """Write the outputs of a processed document.

    The cache loader is written first. The document is written only when
    its directive block was rewritten, and never if the loader write failed,
    so a page never includes a script that does not exist.

    Returns:
        Paths that were written.

    Raises:
        OSError: If a file cannot be written.
    """
    written: list[Path] = []

    if result.artifact is not None:
        atomic_write_bytes(result.artifact.absolute_path, result.artifact.contents)
        written.append(result.artifact.absolute_path)

    if result.rewritten:
        document = result.document
        atomic_write_bytes(document.path, document.contents.encode(document.encoding))
        written.append(document.path)

    for path in written:
        logger.debug("Wrote %s", path)
    return written
