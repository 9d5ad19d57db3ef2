"""Registry for config-driven rule table construction.

The registry resolves the names used in a rule config (field parsers and
custom matcher types) without the engine knowing how tables are authored.

- RegistryBuilder → .build() → Registry (immutable)
- Factories are plain callables: (config: dict) → field parser or TokenMatcher
- load_table() walks the config and compiles a RuleTable

Example::

    builder = RegistryBuilder()
    register_core_parsers(builder)
    registry = builder.build()

    config = load_lexer_config("rules.yaml")
    table = registry.load_table(config)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from sealex._config import PatternConfig, TypedConfig
from sealex._creators import SKIP, Parser, Unit
from sealex._errors import InvalidPatternError, LexError
from sealex._lexer import Rule, RuleTable
from sealex._matchers import compile_pattern

if TYPE_CHECKING:
    from collections.abc import Callable

    from sealex._config import LexerConfig, MatchConfig, ParserConfig, RuleConfig
    from sealex._creators import Creator
    from sealex._types import TokenMatcher

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Limits
# ═══════════════════════════════════════════════════════════════════════════════

MAX_RULES = 1024
MAX_PATTERN_LENGTH = 8192
MAX_REGEX_PATTERN_LENGTH = 4096

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class UnknownNameError(LexError):
    """A parser name or matcher type_url was not found in the registry."""

    def __init__(self, name: str, registry: str, available: list[str]) -> None:
        self.name = name
        self.registry = registry
        self.available = sorted(available)
        if self.available:
            registered = ", ".join(self.available)
            msg = f"unknown {registry}: {name!r} (registered: {registered})"
        else:
            msg = f"unknown {registry}: {name!r} (no {registry}s are registered)"
        super().__init__(msg)


class InvalidConfigError(LexError):
    """A factory rejected its config payload."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"invalid config: {source}")


class TooManyRulesError(LexError):
    """Config has too many rules."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(f"too many rules: {count} exceeds maximum {max_}")


class PatternTooLongError(InvalidPatternError):
    """A pattern exceeds the length limit."""

    def __init__(self, pattern: str, max_: int) -> None:
        self.length = len(pattern)
        self.max = max_
        super().__init__(
            pattern, f"pattern length {self.length} exceeds maximum {max_}"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Config-produced token kinds
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Field:
    """Token kind carrying a parsed value, produced by parser rules."""

    kind: str
    value: Any


def _tagged(kind: str, parse: Callable[[str], Any], text: str) -> Field:
    return Field(kind, parse(text))


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════

type ParserFactory = Callable[[dict[str, Any]], Callable[[str], Any]]
type MatcherFactory = Callable[[dict[str, Any]], TokenMatcher]


class RegistryBuilder:
    """Builder for constructing a Registry.

    Register field parser and matcher factories by name, then call build()
    to produce an immutable Registry.
    """

    def __init__(self) -> None:
        self._parser_factories: dict[str, ParserFactory] = {}
        self._matcher_factories: dict[str, MatcherFactory] = {}

    def parser(self, name: str, factory: ParserFactory) -> RegistryBuilder:
        """Register a field parser factory under a name."""
        self._parser_factories[name] = factory
        return self

    def matcher(self, type_url: str, factory: MatcherFactory) -> RegistryBuilder:
        """Register a TokenMatcher factory with a type URL."""
        self._matcher_factories[type_url] = factory
        return self

    def build(self) -> Registry:
        """Freeze the registry. No further registration is possible."""
        return Registry(
            _parser_factories=MappingProxyType(dict(self._parser_factories)),
            _matcher_factories=MappingProxyType(dict(self._matcher_factories)),
        )


def register_core_parsers(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the built-in field parsers.

    - ``int``: config ``base`` (default 10) and ``strip`` (characters removed
      from both ends first, e.g. ``"h"`` for ``1fh``)
    - ``float``
    - ``text``: the matched text unchanged
    """
    return (
        builder.parser("int", _int_parser)
        .parser("float", lambda config: float)
        .parser("text", lambda config: str)
    )


def _int_parser(config: dict[str, Any]) -> Callable[[str], int]:
    base = config.get("base", 10)
    strip = config.get("strip")
    if not isinstance(base, int):
        msg = f"int parser 'base' must be an integer, got {type(base).__name__}"
        raise ValueError(msg)
    if strip is not None and not isinstance(strip, str):
        msg = f"int parser 'strip' must be a string, got {type(strip).__name__}"
        raise ValueError(msg)
    return partial(_parse_int, base, strip)


def _parse_int(base: int, strip: str | None, text: str) -> int:
    if strip:
        text = text.strip(strip)
    return int(text, base)


# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Registry:
    """Immutable registry of field parser and matcher factories.

    Constructed via RegistryBuilder. Use load_table() to compile config
    into a runtime RuleTable.
    """

    _parser_factories: MappingProxyType[str, ParserFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )
    _matcher_factories: MappingProxyType[str, MatcherFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def load_table(self, config: LexerConfig) -> RuleTable[Any]:
        """Compile a RuleTable from configuration, preserving rule order.

        Raises:
            UnknownNameError: parser name or matcher type_url not registered
            InvalidConfigError: a factory rejected its config
            TooManyRulesError: too many rules or skip entries
            PatternTooLongError: pattern exceeds length limit
            InvalidPatternError: pattern failed to compile
        """
        if len(config.rules) > MAX_RULES:
            raise TooManyRulesError(len(config.rules), MAX_RULES)
        if len(config.skips) > MAX_RULES:
            raise TooManyRulesError(len(config.skips), MAX_RULES)

        rules = tuple(
            Rule(self._load_match(rc.match), self._load_creator(rc))
            for rc in config.rules
        )
        skips = tuple(self._load_match(mc) for mc in config.skips)
        logger.debug(
            "loaded rule table from config: %d rules, %d skip rules",
            len(rules),
            len(skips),
        )
        return RuleTable(rules=rules, skips=skips)

    @property
    def parser_count(self) -> int:
        """Number of registered field parsers."""
        return len(self._parser_factories)

    @property
    def matcher_count(self) -> int:
        """Number of registered matcher types."""
        return len(self._matcher_factories)

    def contains_parser(self, name: str) -> bool:
        return name in self._parser_factories

    def contains_matcher(self, type_url: str) -> bool:
        return type_url in self._matcher_factories

    def parser_names(self) -> list[str]:
        """Return all registered parser names (sorted)."""
        return sorted(self._parser_factories.keys())

    def matcher_type_urls(self) -> list[str]:
        """Return all registered matcher type URLs (sorted)."""
        return sorted(self._matcher_factories.keys())

    # ── Private loading methods ────────────────────────────────────────────

    def _load_match(self, config: MatchConfig) -> TokenMatcher:
        match config:
            case PatternConfig(pattern=pattern, is_regex=is_regex):
                _check_pattern_length(pattern, is_regex)
                return compile_pattern(pattern, is_regex)
            case TypedConfig(type_url=type_url, config=payload):
                factory = self._matcher_factories.get(type_url)
                if factory is None:
                    raise UnknownNameError(
                        type_url, "matcher", list(self._matcher_factories.keys())
                    )
                try:
                    return factory(payload)
                except LexError:
                    raise
                except Exception as e:
                    raise InvalidConfigError(str(e)) from e
            case _:  # pragma: no cover
                msg = f"unknown match config type: {type(config).__name__}"
                raise InvalidConfigError(msg)

    def _load_creator(self, config: RuleConfig) -> Creator[Any]:
        if config.skip:
            return SKIP
        if config.kind is None:
            msg = "rule has neither a kind nor 'skip: true'"
            raise InvalidConfigError(msg)
        if config.parser is None:
            return Unit(config.kind)
        parse = self._load_parser(config.parser)
        return Parser(partial(_tagged, config.kind, parse))

    def _load_parser(self, config: ParserConfig) -> Callable[[str], Any]:
        factory = self._parser_factories.get(config.name)
        if factory is None:
            raise UnknownNameError(
                config.name, "parser", list(self._parser_factories.keys())
            )
        try:
            return factory(config.config)
        except Exception as e:
            raise InvalidConfigError(str(e)) from e


def _check_pattern_length(pattern: str, is_regex: bool) -> None:
    """Enforce pattern length limits on built-in pattern specs."""
    limit = MAX_REGEX_PATTERN_LENGTH if is_regex else MAX_PATTERN_LENGTH
    if len(pattern) > limit:
        raise PatternTooLongError(pattern, limit)
