"""Test utilities for sealex.

Provides a small custom TokenMatcher and registry hooks for use in tests and
examples. KeywordMatcher shows the extensibility point: any object with a
``try_match`` method can sit in a RuleTable next to the built-in matchers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sealex._errors import InvalidPatternError

if TYPE_CHECKING:
    from sealex._registry import RegistryBuilder
    from sealex._token import TokenInfo


@dataclass(frozen=True, slots=True)
class KeywordMatcher:
    """Match a word only when it is not followed by an identifier character.

    >>> KeywordMatcher("if").try_match("if x")
    2
    >>> KeywordMatcher("if").try_match("iffy") is None
    True
    """

    word: str
    _size: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.word:
            raise InvalidPatternError(self.word, "empty keyword")
        object.__setattr__(self, "_size", len(self.word.encode("utf-8")))

    def try_match(self, remaining: str, /) -> int | None:
        if not remaining.startswith(self.word):
            return None
        rest = remaining[len(self.word) : len(self.word) + 1]
        if rest and (rest.isalnum() or rest == "_"):
            return None
        return self._size


def register(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the test-domain types.

    Matcher type URL: sealex.test.v1.Keyword, config ``{ "word": "if" }``.
    Parser name: ``upper``.
    """
    return builder.matcher("sealex.test.v1.Keyword", _keyword_factory).parser(
        "upper", lambda config: str.upper
    )


def _keyword_factory(config: dict[str, Any]) -> KeywordMatcher:
    word = config.get("word")
    if not isinstance(word, str):
        msg = "KeywordMatcher requires a 'word' field (string)"
        raise ValueError(msg)
    return KeywordMatcher(word=word)


def spans(tokens: list[TokenInfo[Any]]) -> list[tuple[int, int]]:
    """Return the ``(start, end)`` byte span of each token."""
    return [t.span for t in tokens]


def kinds(tokens: list[TokenInfo[Any]]) -> list[Any]:
    """Return the kind of each token."""
    return [t.kind for t in tokens]
