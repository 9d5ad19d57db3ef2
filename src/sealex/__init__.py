"""sealex — data-driven, priority-ordered lexer.

All public types are exported from this module for flat imports:

    from sealex import Lexer, RuleSpec, RuleTable, SkipSpec, Unit, Parser
"""

__version__ = "0.3.0"

# Config types — see sealex._config for details
from sealex._config import (
    ConfigParseError,
    LexerConfig,
    MatchConfig,
    ParserConfig,
    PatternConfig,
    RuleConfig,
    TypedConfig,
    load_lexer_config,
    parse_lexer_config,
)

# Creators
from sealex._creators import SKIP, Creator, Parser, Skip, Unit, creator_of

# Errors
from sealex._errors import (
    FieldParseError,
    InvalidMatchError,
    InvalidPatternError,
    LexError,
    UnexpectedCharError,
)

# Engine
from sealex._lexer import Lexer, Rule, RuleSpec, RuleTable, SkipSpec, tokenize

# Concrete matchers
from sealex._matchers import LiteralMatcher, RegexMatcher, anchor_pattern, compile_pattern

# Registry — see sealex._registry for details
from sealex._registry import (
    MAX_PATTERN_LENGTH,
    MAX_REGEX_PATTERN_LENGTH,
    MAX_RULES,
    Field,
    InvalidConfigError,
    PatternTooLongError,
    Registry,
    RegistryBuilder,
    TooManyRulesError,
    UnknownNameError,
    register_core_parsers,
)
from sealex._token import TokenInfo

# Protocols
from sealex._types import FieldParser, TokenCreator, TokenMatcher, Utf8TokenMatcher

__all__ = [
    # Protocols
    "TokenMatcher",
    "Utf8TokenMatcher",
    "TokenCreator",
    "FieldParser",
    # Records
    "TokenInfo",
    # Errors
    "LexError",
    "InvalidPatternError",
    "UnexpectedCharError",
    "FieldParseError",
    "InvalidMatchError",
    # Matchers
    "LiteralMatcher",
    "RegexMatcher",
    "anchor_pattern",
    "compile_pattern",
    # Creators
    "Unit",
    "Parser",
    "Skip",
    "SKIP",
    "Creator",
    "creator_of",
    # Engine
    "RuleSpec",
    "SkipSpec",
    "Rule",
    "RuleTable",
    "Lexer",
    "tokenize",
    # Config types
    "PatternConfig",
    "TypedConfig",
    "MatchConfig",
    "ParserConfig",
    "RuleConfig",
    "LexerConfig",
    "ConfigParseError",
    "parse_lexer_config",
    "load_lexer_config",
    # Registry
    "RegistryBuilder",
    "Registry",
    "register_core_parsers",
    "Field",
    "UnknownNameError",
    "InvalidConfigError",
    "TooManyRulesError",
    "PatternTooLongError",
    "MAX_RULES",
    "MAX_PATTERN_LENGTH",
    "MAX_REGEX_PATTERN_LENGTH",
]
