"""Lexer — priority-ordered scanning over a compiled rule table.

Evaluation semantics:
- Skip matchers are tried before token rules at every position, restarting
  from the top of the skip list after each hit
- Token rules are tried in declaration order (first-match-wins, never
  longest-match)
- A Skip creator consumes its match and scanning continues in the same call
- The first error is terminal; it is raised again by every later call

Offsets reported in tokens and errors are UTF-8 byte offsets.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from functools import partial
from typing import TYPE_CHECKING

from sealex._creators import Creator, Skip, creator_of
from sealex._errors import InvalidMatchError, LexError, UnexpectedCharError
from sealex._matchers import compile_pattern
from sealex._token import TokenInfo
from sealex._types import Utf8TokenMatcher

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from sealex._types import TokenCreator, TokenMatcher

logger = logging.getLogger(__name__)

# Probe of the encoded input at the cursor; returns bytes consumed or None.
type Probe = Callable[[memoryview], int | None]


def probe_of(matcher: TokenMatcher) -> Probe:
    """Return the cheapest way to run ``matcher`` against encoded input."""
    if isinstance(matcher, Utf8TokenMatcher):
        return matcher.try_match_utf8
    return partial(_probe_decoded, matcher)


def _probe_decoded(matcher: TokenMatcher, remaining: memoryview) -> int | None:
    return matcher.try_match(str(remaining, "utf-8"))


@dataclass(frozen=True, slots=True)
class RuleSpec[T]:
    """Uncompiled token rule: pattern text, interpretation tag, creator.

    A bare token kind given as ``creator`` is wrapped in a Unit creator.
    """

    pattern: str
    creator: Creator[T]
    is_regex: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "creator", creator_of(self.creator))


@dataclass(frozen=True, slots=True)
class SkipSpec:
    """Uncompiled skip rule (whitespace, comments)."""

    pattern: str
    is_regex: bool = False


@dataclass(frozen=True, slots=True)
class Rule[T]:
    """Pairs a compiled matcher with its creator.

    ``emits`` is False only for the Skip creator; any other creator's
    result becomes a token, even when that result is None.
    """

    matcher: TokenMatcher
    creator: TokenCreator
    probe: Probe = field(init=False, repr=False, compare=False)
    emits: bool = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "probe", probe_of(self.matcher))
        object.__setattr__(self, "emits", not isinstance(self.creator, Skip))


@dataclass(frozen=True, slots=True)
class RuleTable[T]:
    """Compiled, ordered rule table.

    Nothing in a table is mutated after construction, so one table can
    back any number of lexers, including lexers running on other threads.

    INV: Rule order is priority order: earlier rules win.
    """

    rules: tuple[Rule[T], ...]
    skips: tuple[TokenMatcher, ...] = ()
    skip_probes: tuple[Probe, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "skip_probes", tuple(probe_of(m) for m in self.skips))

    @classmethod
    def compile(
        cls,
        rules: Iterable[RuleSpec[T]],
        skips: Iterable[SkipSpec] = (),
    ) -> RuleTable[T]:
        """Compile rule and skip specs, preserving their order.

        Raises:
            InvalidPatternError: If any pattern fails to compile. No table
                is produced.
        """
        compiled_rules = tuple(
            Rule(compile_pattern(spec.pattern, spec.is_regex), spec.creator)
            for spec in rules
        )
        compiled_skips = tuple(
            compile_pattern(spec.pattern, spec.is_regex) for spec in skips
        )
        logger.debug(
            "compiled rule table: %d rules, %d skip rules",
            len(compiled_rules),
            len(compiled_skips),
        )
        return cls(rules=compiled_rules, skips=compiled_skips)

    def lexer(self, source: str) -> Lexer[T]:
        """Create a lexer over ``source`` backed by this table."""
        return Lexer(source, self)

    def tokenize(self, source: str) -> list[TokenInfo[T]]:
        """Tokenize ``source`` in one batch."""
        return Lexer(source, self).collect()


class _State(Enum):
    SCANNING = auto()
    EXHAUSTED = auto()
    FAILED = auto()


class Lexer[T]:
    """Pull-based scanner over one input.

    A lexer owns its cursor and is single-pass: it is not safe to share
    between threads, and it cannot be rewound. Build one lexer per input
    and share the RuleTable instead.
    """

    __slots__ = ("_data", "_error", "_offset", "_pos", "_source", "_state", "_table", "_view")

    def __init__(self, source: str, table: RuleTable[T]) -> None:
        self._source = source
        self._table = table
        self._data = source.encode("utf-8")
        self._view = memoryview(self._data)
        self._pos = 0
        self._offset = 0
        self._state = _State.SCANNING if self._data else _State.EXHAUSTED
        self._error: LexError | None = None

    @classmethod
    def from_specs(
        cls,
        source: str,
        rules: Iterable[RuleSpec[T]],
        skips: Iterable[SkipSpec] = (),
    ) -> Lexer[T]:
        """Compile specs and construct a lexer in one step.

        Raises:
            InvalidPatternError: If any pattern fails to compile.
        """
        return cls(source, RuleTable.compile(rules, skips))

    def __repr__(self) -> str:
        return f"Lexer(position={self._offset}, state={self._state.name})"

    @property
    def source(self) -> str:
        return self._source

    @property
    def table(self) -> RuleTable[T]:
        return self._table

    @property
    def position(self) -> int:
        """Byte offset of the cursor."""
        return self._offset

    @property
    def exhausted(self) -> bool:
        return self._state is _State.EXHAUSTED

    def next_token(self) -> TokenInfo[T] | None:
        """Produce the next token, or None once the input is exhausted.

        Raises:
            UnexpectedCharError: No rule matches at the cursor.
            FieldParseError: The winning rule's Parser creator failed.
            InvalidMatchError: A matcher reported a size that does not fit
                the input.
        """
        if self._error is not None:
            raise self._error
        if self._state is _State.EXHAUSTED:
            return None
        try:
            return self._step()
        except LexError as e:
            self._state = _State.FAILED
            self._error = e
            logger.debug("scan failed: %s", e)
            raise

    def __iter__(self) -> Iterator[TokenInfo[T]]:
        return self

    def __next__(self) -> TokenInfo[T]:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def results(self) -> Iterator[TokenInfo[T] | LexError]:
        """Yield tokens, then the terminal error (if any) as a value.

        Stops after exhaustion or after yielding the first error, so the
        tokens produced before a failure stay available to the caller.
        """
        while True:
            try:
                token = self.next_token()
            except LexError as e:
                yield e
                return
            if token is None:
                return
            yield token

    def collect(self) -> list[TokenInfo[T]]:
        """Pull every remaining token.

        Raises:
            LexError: The first error encountered; tokens collected before
                it are discarded.
        """
        return list(self)

    # ── Scanning ───────────────────────────────────────────────────────────

    def _step(self) -> TokenInfo[T] | None:
        while True:
            self._skip()
            if self._offset >= len(self._data):
                self._state = _State.EXHAUSTED
                return None

            remaining = self._view[self._offset :]
            for rule in self._table.rules:
                size = rule.probe(remaining)
                # Zero-length matches never count, so the cursor always moves.
                if not size:
                    continue
                start = self._offset
                text = self._advance(size, rule.matcher)
                if not rule.emits:
                    break
                kind = rule.creator.create(text, start)
                return TokenInfo(kind, text, start, self._offset)
            else:
                raise UnexpectedCharError(self._offset, self._source[self._pos])

    def _skip(self) -> None:
        skips = tuple(zip(self._table.skips, self._table.skip_probes))
        while self._offset < len(self._data):
            remaining = self._view[self._offset :]
            for matcher, probe in skips:
                size = probe(remaining)
                if size:
                    self._advance(size, matcher)
                    break
            else:
                return

    def _advance(self, size: int, matcher: TokenMatcher) -> str:
        start = self._offset
        end = start + size
        if size < 0 or end > len(self._data):
            msg = "size does not fit the remaining input"
            raise InvalidMatchError(matcher, start, size, msg)
        try:
            text = self._data[start:end].decode("utf-8")
        except UnicodeDecodeError as e:
            msg = "match ends inside a multi-byte character"
            raise InvalidMatchError(matcher, start, size, msg) from e
        self._pos += len(text)
        self._offset = end
        return text


def tokenize[T](source: str, table: RuleTable[T]) -> list[TokenInfo[T]]:
    """Tokenize ``source`` with ``table``; all tokens or the first error."""
    return Lexer(source, table).collect()
