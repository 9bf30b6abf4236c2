"""Line ending normalization for generated scripts."""

from __future__ import annotations

import os
import re

EOL_STYLES: dict[str, str] = {
    "lf": "\n",
    "crlf": "\r\n",
    "native": os.linesep,
}

_LINE_ENDING = re.compile(r"\r\n|\r|\n")


def resolve_eol(style: str | None) -> str:
    """Map an EOL style name to its newline sequence.

    None selects the platform newline.

    Raises:
        ValueError: If the style is unknown.
    """
    if style is None:
        return os.linesep
    try:
        return EOL_STYLES[style.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown EOL style: {style!r} (expected one of {', '.join(EOL_STYLES)})"
        ) from None


def normalize_eol(text: str, eol: str = os.linesep) -> str:
    """Convert every line ending in `text` to `eol`. No newline is appended."""
    return _LINE_ENDING.sub(eol, text)
