"""Parsing and rewriting of ``templates:build`` comment blocks."""

from ngcache.directives.base import (
    CLOSE_MARKER,
    COMMENT_MARKER,
    COMMENT_TAG,
    DEFAULT_TARGET,
    Directive,
    DirectiveBlock,
    DirectiveError,
    MalformedDirectiveError,
    MissingModuleError,
    RewriteOptions,
)
from ngcache.directives.parser import (
    detect_newline,
    extract,
    has_directive,
    include_tag,
    parse_parameters,
    rewrite,
)

__all__ = [
    "CLOSE_MARKER",
    "COMMENT_MARKER",
    "COMMENT_TAG",
    "DEFAULT_TARGET",
    "Directive",
    "DirectiveBlock",
    "DirectiveError",
    "MalformedDirectiveError",
    "MissingModuleError",
    "RewriteOptions",
    "detect_newline",
    "extract",
    "has_directive",
    "include_tag",
    "parse_parameters",
    "rewrite",
]
