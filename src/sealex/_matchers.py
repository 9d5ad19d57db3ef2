"""Concrete token matchers and the pattern compiler.

Each matcher is a frozen dataclass, immutable after construction and safe
to share between lexers scanning different inputs. ``try_match`` always
reports the consumed length in UTF-8 bytes, so a multi-byte character
contributes its full encoded length.

Both matchers also implement ``try_match_utf8``, which probes a view of the
already-encoded input. The lexer uses it so each probe costs the length of
the match, not the length of the remaining input.

Regex uses ``google-re2`` for guaranteed linear-time matching. RE2 does not
support backreferences or lookahead/lookbehind because they require
backtracking; patterns using them are rejected at compile time.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import re2

from sealex._errors import InvalidPatternError

# Anchor markers that already pin a pattern to the start of the probed text.
_ANCHORS = ("^", r"\A")


@dataclass(frozen=True, slots=True)
class LiteralMatcher:
    """Exact prefix match.

    The literal never goes through the regex engine, so metacharacters
    such as ``+``, ``.``, ``*`` or a backslash are plain characters.

    Raises:
        InvalidPatternError: If the literal is empty.
    """

    literal: str
    _encoded: bytes = field(init=False, repr=False, compare=False)
    _size: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.literal:
            raise InvalidPatternError(self.literal, "empty literal")
        encoded = self.literal.encode("utf-8")
        object.__setattr__(self, "_encoded", encoded)
        object.__setattr__(self, "_size", len(encoded))

    def try_match(self, remaining: str, /) -> int | None:
        if remaining.startswith(self.literal):
            return self._size
        return None

    def try_match_utf8(self, remaining: memoryview, /) -> int | None:
        # UTF-8 is prefix-free, so a byte prefix match is a character prefix match.
        if remaining[: self._size] == self._encoded:
            return self._size
        return None


@dataclass(frozen=True, slots=True)
class RegexMatcher:
    """Regular expression match anchored at the start of the probed text.

    The pattern is wrapped as ``^(?:pattern)`` unless the author already
    anchored it with ``^`` or ``\\A``; ``anchored`` holds the text that was
    actually compiled. It is compiled as a UTF-8 bytes pattern, so match
    ends are byte offsets without re-encoding the input.

    Raises:
        InvalidPatternError: If the pattern is not valid RE2 syntax.
    """

    pattern: str
    anchored: str = field(init=False)
    _compiled: re2.Pattern[bytes] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        anchored = anchor_pattern(self.pattern)
        try:
            compiled = re2.compile(anchored.encode("utf-8"))
        except re2.error as e:
            raise InvalidPatternError(self.pattern, str(e)) from e
        object.__setattr__(self, "anchored", anchored)
        object.__setattr__(self, "_compiled", compiled)

    def try_match(self, remaining: str, /) -> int | None:
        m = self._compiled.match(remaining.encode("utf-8"))
        if m is None:
            return None
        return m.end()

    def try_match_utf8(self, remaining: memoryview, /) -> int | None:
        # The view starts at the cursor, so ``^`` still anchors there.
        m = self._compiled.match(remaining)
        if m is None:
            return None
        return m.end()


def anchor_pattern(pattern: str) -> str:
    """Force start-anchoring without doubling an anchor the author supplied."""
    if pattern.startswith(_ANCHORS):
        return pattern
    return f"^(?:{pattern})"


def compile_pattern(pattern: str, is_regex: bool) -> LiteralMatcher | RegexMatcher:
    """Compile a raw ``(pattern, is_regex)`` pair into a matcher.

    This is the single validation point for patterns: a bad pattern fails
    here, never while scanning.

    Raises:
        InvalidPatternError: On invalid regex syntax or an empty literal.
    """
    if is_regex:
        return RegexMatcher(pattern)
    return LiteralMatcher(pattern)
