"""Core protocols and type aliases for sealex.

- TokenMatcher is the matching port: probe the remaining input, report bytes consumed
- Utf8TokenMatcher adds a zero-copy probe over the encoded input
- FieldParser is the value-construction port used by Parser creators
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

# A field constructor takes the matched text (and, when requested, the
# absolute byte offset where the match began) and returns the token kind.
type FieldParser[T] = Callable[[str], T] | Callable[[str, int], T]


@runtime_checkable
class TokenMatcher(Protocol):
    """Probe the start of the remaining input.

    Returns the number of UTF-8 bytes consumed by a match anchored at
    offset 0, or None when the pattern does not match there.

    Literal and regex matchers ship with sealex; anything else satisfying
    this protocol can be placed in a compiled RuleTable directly.
    """

    def try_match(self, remaining: str, /) -> int | None: ...


@runtime_checkable
class Utf8TokenMatcher(TokenMatcher, Protocol):
    """A TokenMatcher that can also probe UTF-8 bytes in place.

    ``remaining`` is a view of the encoded input starting at the cursor.
    The lexer prefers this method when a matcher has it, so a scan never
    copies the rest of the input per probe. Matchers with only
    ``try_match`` receive a decoded copy instead.
    """

    def try_match_utf8(self, remaining: memoryview, /) -> int | None: ...


@runtime_checkable
class TokenCreator(Protocol):
    """Turn matched text into a token kind.

    Whatever ``create`` returns, None included, becomes the token kind.
    Only the Skip creator consumes a match without emitting a token.
    """

    def create(self, text: str, start: int, /) -> Any: ...
