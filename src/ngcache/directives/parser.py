"""Directive block extraction, parsing and rewriting.

All functions are pure: they take document text and return values, nothing
is stored between calls.
"""

from __future__ import annotations

import logging

from ngcache.directives.base import (
    CLOSE_MARKER,
    COMMENT_TAG,
    DEFAULT_SOURCE,
    DEFAULT_TARGET,
    Directive,
    DirectiveBlock,
    MalformedDirectiveError,
    MissingModuleError,
    RewriteOptions,
)
from ngcache.directives.scanner import (
    COMMENT_CLOSE,
    END_MARKER,
    TokenKind,
    find_close_marker,
    find_open_marker,
    scan_parameters,
)

logger = logging.getLogger(__name__)


def has_directive(text: str) -> bool:
    """Check whether the directive tag appears anywhere in `text`."""
    return COMMENT_TAG in text


def detect_newline(text: str) -> str:
    """Return the newline sequence used by `text` ("\\r\\n" or "\\n")."""
    return "\r\n" if "\r\n" in text else "\n"


def include_tag(href: str) -> str:
    """Build the script include line for a cache loader file."""
    return f'<script type="text/javascript" src="{href}"></script>'


def _split_end_marker(params: str) -> tuple[str, bool]:
    """Strip a trailing ``/templates`` from open marker parameters.

    Returns the remaining parameter text and whether the marker was present.
    """
    stripped = params.rstrip()
    if not stripped.endswith(END_MARKER):
        return params, False

    head = stripped[: -len(END_MARKER)]
    if head and not head[-1].isspace():
        return params, False
    return head.rstrip(), True


def extract(text: str) -> DirectiveBlock | None:
    """Locate the first directive block in a document.

    The block runs from the open marker (including the whitespace that
    indents it on its line) to the matching ``<!-- /templates -->``. A
    self-closing open marker, or one with no close marker after it, is a
    block on its own.

    Returns:
        The block, or None if the document has no open marker.

    Raises:
        MalformedDirectiveError: If the open marker is not terminated.
    """
    open_token = find_open_marker(text)
    if open_token is None:
        return None

    line_start = text.rfind("\n", 0, open_token.start) + 1
    prefix = text[line_start : open_token.start]
    if prefix == "" or prefix.isspace():
        lead = prefix
        start = line_start
    else:
        lead = ""
        start = open_token.start

    params, self_closing = _split_end_marker(open_token.value)
    params_start = open_token.end - len(COMMENT_CLOSE) - len(open_token.value)

    if self_closing:
        opening = f"{text[start:params_start]}{params} {COMMENT_CLOSE}"
        end = open_token.end
    else:
        opening = text[start : open_token.end]
        end = open_token.end
        close_token = find_close_marker(text, open_token.end)
        next_tag = text.find(COMMENT_TAG, open_token.end)
        if close_token is not None and (next_tag < 0 or next_tag > close_token.start):
            end = close_token.end
        else:
            logger.debug("No close marker for '%s' block, using open marker", COMMENT_TAG)

    return DirectiveBlock(
        start=start,
        end=end,
        text=text[start:end],
        lead=lead,
        opening=opening,
        params=params,
        self_closing=self_closing,
    )


def parse_parameters(block_text: str, default_target: str = DEFAULT_TARGET) -> Directive:
    """Parse the open marker parameters of a directive block.

    Recognised keys are ``module``, ``source`` (repeatable) and ``target``.
    Other keys are kept verbatim in ``Directive.extras``.

    Args:
        block_text: Block text containing the open marker.
        default_target: Target used when the block declares none.

    Raises:
        MalformedDirectiveError: If no open marker is found in `block_text`
            or its parameters cannot be tokenised.
        MissingModuleError: If no non-empty ``module`` value is declared.
    """
    open_token = find_open_marker(block_text)
    if open_token is None:
        raise MalformedDirectiveError(f"'{COMMENT_TAG}' block not in correct format.")

    module = ""
    sources: list[str] = []
    target = default_target
    extras: dict[str, str] = {}

    for token in scan_parameters(open_token.value):
        if token.kind is not TokenKind.PARAM:
            continue
        if token.key == "source":
            sources.append(token.value)
        elif token.key == "target":
            target = token.value.replace("\\", "/") or default_target
        elif token.key == "module":
            module = token.value
        else:
            extras[token.key] = token.value

    if not module:
        raise MissingModuleError(f"'{COMMENT_TAG}' block missing \"module\" value.")

    return Directive(
        module=module,
        sources=tuple(sources) or (DEFAULT_SOURCE,),
        target=target,
        extras=extras,
    )


def rewrite(text: str, block: DirectiveBlock, options: RewriteOptions) -> str:
    """Return `text` with the directive block rewritten.

    Without ``replace_block`` the opening line is kept and a close marker is
    appended, so the block wraps the include line and can be rebuilt on the
    next run. With ``replace_block`` the block becomes the include line, or
    disappears when ``add_include`` is off.
    """
    if not (options.add_include or options.replace_block):
        return text

    lines: list[str] = []
    if not options.replace_block:
        lines.append(block.opening)
    if options.add_include:
        lines.append(block.lead + include_tag(options.target_href))
    if not options.replace_block:
        lines.append(block.lead + CLOSE_MARKER)

    return text[: block.start] + options.newline.join(lines) + text[block.end :]
