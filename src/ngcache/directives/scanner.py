"""Scanner for ``templates:build`` comment markers.

Recognises three token kinds:

- OPEN:  ``<!-- templates:build ... -->``
- PARAM: ``key="value"`` or ``key='value'`` inside an open marker
- CLOSE: ``<!-- /templates -->``, or ``/templates`` at the end of an open
  marker (self-closing block)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ngcache.directives.base import COMMENT_MARKER, COMMENT_TAG, MalformedDirectiveError

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
END_MARKER = f"/{COMMENT_MARKER}"


class TokenKind(Enum):
    """Kinds of tokens produced by the scanner."""

    OPEN = "open"
    PARAM = "param"
    CLOSE = "close"


@dataclass(frozen=True)
class Token:
    """A scanned token. Offsets are relative to the scanned text."""

    kind: TokenKind
    start: int
    end: int
    key: str = ""
    value: str = ""  # PARAM value, or raw parameter text for OPEN


def _is_key_char(char: str) -> bool:
    return char.isalnum() or char in "_-"


class Scanner:
    """Cursor over a string with small lookahead helpers."""

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def current(self) -> str:
        """Return the character under the cursor, or '' at the end."""
        return "" if self.at_end() else self.text[self.pos]

    def at_boundary(self) -> bool:
        """True at the end of text, on whitespace, or before ``-->``."""
        return (
            self.at_end()
            or self.current().isspace()
            or self.text.startswith(COMMENT_CLOSE, self.pos)
        )

    def consume(self, literal: str) -> bool:
        """Advance past `literal` if it starts at the cursor."""
        if self.text.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def skip_whitespace(self) -> None:
        while not self.at_end() and self.current().isspace():
            self.pos += 1

    def read_while(self, predicate) -> str:
        start = self.pos
        while not self.at_end() and predicate(self.current()):
            self.pos += 1
        return self.text[start : self.pos]


def find_open_marker(text: str, start: int = 0) -> Token | None:
    """Find the first ``templates:build`` open marker at or after `start`.

    Returns an OPEN token spanning ``<!--`` through ``-->`` whose value is
    the raw parameter text, or None if no open marker exists.

    Raises:
        MalformedDirectiveError: If the open marker is never terminated.
    """
    pos = start
    while True:
        idx = text.find(COMMENT_OPEN, pos)
        if idx < 0:
            return None

        scanner = Scanner(text, idx + len(COMMENT_OPEN))
        scanner.skip_whitespace()
        if scanner.consume(COMMENT_TAG) and scanner.at_boundary():
            params_start = scanner.pos
            close = text.find(COMMENT_CLOSE, params_start)
            if close < 0:
                raise MalformedDirectiveError(
                    f"'{COMMENT_TAG}' block not in correct format: "
                    "comment is not terminated."
                )
            return Token(
                TokenKind.OPEN,
                idx,
                close + len(COMMENT_CLOSE),
                value=text[params_start:close],
            )
        pos = idx + len(COMMENT_OPEN)


def find_close_marker(text: str, start: int = 0) -> Token | None:
    """Find the first ``<!-- /templates -->`` close marker at or after `start`."""
    pos = start
    while True:
        idx = text.find(COMMENT_OPEN, pos)
        if idx < 0:
            return None

        scanner = Scanner(text, idx + len(COMMENT_OPEN))
        scanner.skip_whitespace()
        if scanner.consume(END_MARKER):
            scanner.skip_whitespace()
            if scanner.consume(COMMENT_CLOSE):
                return Token(TokenKind.CLOSE, idx, scanner.pos)
        pos = idx + len(COMMENT_OPEN)


def scan_parameters(params: str) -> list[Token]:
    """Tokenise the parameter text of an open marker.

    Returns PARAM tokens in order, optionally followed by a single CLOSE
    token when the marker ends with ``/templates``.

    Raises:
        MalformedDirectiveError: On any text that is not a parameter pair
            or a trailing end marker.
    """
    scanner = Scanner(params)
    tokens: list[Token] = []

    while True:
        scanner.skip_whitespace()
        if scanner.at_end():
            return tokens

        if tokens and tokens[-1].kind is TokenKind.CLOSE:
            raise MalformedDirectiveError(
                f"'{COMMENT_TAG}' block not in correct format: "
                f"unexpected text after '{END_MARKER}'."
            )

        start = scanner.pos
        if scanner.consume(END_MARKER) and scanner.at_boundary():
            tokens.append(Token(TokenKind.CLOSE, start, scanner.pos))
            continue
        scanner.pos = start

        key = scanner.read_while(_is_key_char)
        if not key:
            raise MalformedDirectiveError(
                f"'{COMMENT_TAG}' block not in correct format: "
                f"unexpected {scanner.current()!r} at offset {scanner.pos}."
            )

        scanner.skip_whitespace()
        if not scanner.consume("="):
            raise MalformedDirectiveError(
                f"'{COMMENT_TAG}' block not in correct format: "
                f"expected '=' after {key!r}."
            )

        scanner.skip_whitespace()
        quote = scanner.current()
        if quote not in ('"', "'"):
            raise MalformedDirectiveError(
                f"'{COMMENT_TAG}' block not in correct format: "
                f"value of {key!r} must be quoted."
            )

        value_start = scanner.pos + 1
        value_end = params.find(quote, value_start)
        if value_end < 0:
            raise MalformedDirectiveError(
                f"'{COMMENT_TAG}' block not in correct format: "
                f"unterminated value for {key!r}."
            )

        scanner.pos = value_end + 1
        tokens.append(
            Token(
                TokenKind.PARAM,
                start,
                scanner.pos,
                key=key,
                value=params[value_start:value_end],
            )
        )
