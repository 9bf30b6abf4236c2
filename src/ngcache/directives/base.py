"""Directive and directive block definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Comment block constants
COMMENT_MARKER = "templates"
COMMENT_BLOCKTYPE = "build"
COMMENT_TAG = f"{COMMENT_MARKER}:{COMMENT_BLOCKTYPE}"
CLOSE_MARKER = f"<!-- /{COMMENT_MARKER} -->"

DEFAULT_TARGET = "templates.js"
DEFAULT_SOURCE = "."


class DirectiveError(Exception):
    """Base exception for directive block errors."""


class MalformedDirectiveError(DirectiveError):
    """Raised when a directive block is not in the expected format."""


class MissingModuleError(DirectiveError):
    """Raised when a directive block has no ``module`` value."""


@dataclass(frozen=True)
class Directive:
    """Build parameters parsed from a ``templates:build`` block.

    ``module`` is the AngularJS module the templates are registered under,
    ``sources`` the folders scanned for templates (in declaration order) and
    ``target`` the path of the generated cache loader script.
    """

    module: str
    sources: tuple[str, ...] = (DEFAULT_SOURCE,)
    target: str = DEFAULT_TARGET
    extras: dict[str, str] = field(default_factory=dict)  # Unrecognised keys

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for display."""
        result: dict[str, Any] = {
            "module": self.module,
            "sources": list(self.sources),
            "target": self.target,
        }
        result.update(self.extras)
        return result


@dataclass(frozen=True)
class DirectiveBlock:
    """Location and raw text of a directive block inside a document."""

    start: int
    end: int
    text: str  # Exact document text between start and end
    lead: str  # Whitespace before the open marker on its line
    opening: str  # Open marker with any self-closing end marker removed
    params: str  # Raw parameter text of the open marker
    self_closing: bool = False


@dataclass(frozen=True)
class RewriteOptions:
    """How a directive block is rewritten in its document."""

    add_include: bool = True
    replace_block: bool = False
    target_href: str = DEFAULT_TARGET
    newline: str = "\n"
