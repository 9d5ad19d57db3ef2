"""Error types raised by sealex.

Every error derives from LexError. Construction-time failures
(InvalidPatternError and the config/registry errors) prevent a rule table
from being built; run-time failures (UnexpectedCharError, FieldParseError,
InvalidMatchError) terminate a scan.
"""

from __future__ import annotations


class LexError(Exception):
    """Base class for all sealex errors."""


class InvalidPatternError(LexError):
    """A rule's pattern text could not be compiled."""

    def __init__(self, pattern: str, detail: str) -> None:
        self.pattern = pattern
        self.detail = detail
        super().__init__(f"invalid pattern {pattern!r}: {detail}")


class UnexpectedCharError(LexError):
    """No skip or token rule matched at a position."""

    def __init__(self, position: int, character: str) -> None:
        self.position = position
        self.character = character
        super().__init__(
            f"unexpected character {character!r} at position {position}"
        )


class FieldParseError(LexError):
    """A Parser creator failed on its matched text.

    ``position`` is the byte offset where the matched span began.
    ``cause`` is the exception raised by the field constructor.
    """

    def __init__(self, position: int, cause: BaseException) -> None:
        self.position = position
        self.cause = cause
        super().__init__(f"error parsing token at position {position}: {cause}")


class InvalidMatchError(LexError):
    """A matcher reported a size that does not fit the remaining input.

    The size must be positive, stay within the input and end on a
    character boundary.
    """

    def __init__(self, matcher: object, position: int, size: int, detail: str) -> None:
        self.matcher = matcher
        self.position = position
        self.size = size
        super().__init__(
            f"matcher {matcher!r} reported {size} bytes at position {position}: {detail}"
        )
