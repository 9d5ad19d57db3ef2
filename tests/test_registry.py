"""Tests for sealex registry (sealex._registry).

Validates the builder → frozen registry → load_table pipeline.
"""

import pytest

from sealex import (
    MAX_PATTERN_LENGTH,
    MAX_REGEX_PATTERN_LENGTH,
    MAX_RULES,
    Field,
    InvalidConfigError,
    InvalidPatternError,
    LexerConfig,
    PatternConfig,
    PatternTooLongError,
    Registry,
    RegistryBuilder,
    RuleConfig,
    TokenInfo,
    TooManyRulesError,
    UnknownNameError,
    parse_lexer_config,
    register_core_parsers,
    tokenize,
)
from sealex.testing import KeywordMatcher, kinds, register


class TestRegistryBuilder:
    """Tests for RegistryBuilder."""

    def test_builder_registers_and_freezes(self) -> None:
        builder = RegistryBuilder()
        builder.parser("upper", lambda cfg: str.upper)
        registry = builder.build()

        assert registry.parser_count == 1
        assert registry.contains_parser("upper")
        assert not registry.contains_parser("lower")

    def test_build_snapshots_factories(self) -> None:
        builder = RegistryBuilder()
        registry = builder.build()
        builder.parser("late", lambda cfg: str)
        assert not registry.contains_parser("late")

    def test_core_parsers(self) -> None:
        registry = register_core_parsers(RegistryBuilder()).build()
        assert registry.parser_names() == ["float", "int", "text"]

    def test_register_helper(self) -> None:
        registry = register(RegistryBuilder()).build()
        assert registry.contains_matcher("sealex.test.v1.Keyword")
        assert registry.contains_parser("upper")
        assert registry.matcher_count == 1

    def test_introspection_sorted(self) -> None:
        builder = RegistryBuilder()
        builder.matcher("b.Matcher", lambda cfg: KeywordMatcher("b"))
        builder.matcher("a.Matcher", lambda cfg: KeywordMatcher("a"))
        assert builder.build().matcher_type_urls() == ["a.Matcher", "b.Matcher"]


class TestLoadTable:
    """Tests for Registry.load_table()."""

    def _load(self, registry: Registry, data: dict) -> object:
        return registry.load_table(parse_lexer_config(data))

    def test_unit_and_parser_rules(self, registry: Registry) -> None:
        table = self._load(
            registry,
            {
                "skip": [{"regex": r"\s+"}],
                "rules": [
                    {"regex": r"\d+", "kind": "NUMBER", "parser": "int"},
                    {"literal": "+", "kind": "PLUS"},
                ],
            },
        )
        assert tokenize("1 + 22", table) == [
            TokenInfo(Field("NUMBER", 1), "1", 0, 1),
            TokenInfo("PLUS", "+", 2, 3),
            TokenInfo(Field("NUMBER", 22), "22", 4, 6),
        ]

    def test_rule_without_kind_or_skip(self, registry: Registry) -> None:
        config = LexerConfig(rules=(RuleConfig(match=PatternConfig("a", is_regex=False)),))
        with pytest.raises(InvalidConfigError, match="neither a kind nor"):
            registry.load_table(config)

    def test_parser_config(self, registry: Registry) -> None:
        table = self._load(
            registry,
            {
                "rules": [
                    {
                        "regex": "[0-9a-f]+h",
                        "kind": "HEX",
                        "parser": {"name": "int", "config": {"base": 16, "strip": "h"}},
                    }
                ]
            },
        )
        assert kinds(tokenize("1fh", table)) == [Field("HEX", 31)]

    def test_float_and_text_parsers(self, registry: Registry) -> None:
        table = self._load(
            registry,
            {
                "skip": [{"literal": " "}],
                "rules": [
                    {"regex": r"\d+\.\d+", "kind": "FLOAT", "parser": "float"},
                    {"regex": "[a-z]+", "kind": "WORD", "parser": "text"},
                ],
            },
        )
        assert kinds(tokenize("1.5 ab", table)) == [Field("FLOAT", 1.5), Field("WORD", "ab")]

    def test_skip_rule(self, registry: Registry) -> None:
        table = self._load(
            registry,
            {"rules": [{"literal": "-", "skip": True}, {"literal": "x", "kind": "X"}]},
        )
        assert kinds(tokenize("-x-x-", table)) == ["X", "X"]

    def test_custom_matcher(self, registry: Registry) -> None:
        table = self._load(
            registry,
            {
                "skip": [{"regex": r"\s+"}],
                "rules": [
                    {
                        "matcher": {"type_url": "sealex.test.v1.Keyword", "config": {"word": "if"}},
                        "kind": "IF",
                    },
                    {"regex": "[a-z]+", "kind": "IDENT", "parser": "upper"},
                ],
            },
        )
        assert kinds(tokenize("if iffy", table)) == ["IF", Field("IDENT", "IFFY")]

    def test_unknown_parser(self, registry: Registry) -> None:
        with pytest.raises(UnknownNameError) as exc_info:
            self._load(registry, {"rules": [{"literal": "a", "kind": "A", "parser": "nope"}]})
        err = exc_info.value
        assert err.name == "nope"
        assert err.registry == "parser"
        assert "int" in err.available

    def test_unknown_matcher(self) -> None:
        registry = RegistryBuilder().build()
        with pytest.raises(UnknownNameError, match="no matchers are registered"):
            self._load(registry, {"rules": [{"matcher": {"type_url": "x.Y"}, "kind": "A"}]})

    def test_factory_rejects_config(self, registry: Registry) -> None:
        with pytest.raises(InvalidConfigError, match="requires a 'word'"):
            self._load(
                registry,
                {"rules": [{"matcher": {"type_url": "sealex.test.v1.Keyword"}, "kind": "A"}]},
            )

    def test_bad_int_base(self, registry: Registry) -> None:
        with pytest.raises(InvalidConfigError, match="base"):
            self._load(
                registry,
                {
                    "rules": [
                        {"regex": "1", "kind": "A", "parser": {"name": "int", "config": {"base": "x"}}}
                    ]
                },
            )

    def test_invalid_regex(self, registry: Registry) -> None:
        with pytest.raises(InvalidPatternError):
            self._load(registry, {"rules": [{"regex": "(", "kind": "A"}]})

    def test_invalid_skip_regex(self, registry: Registry) -> None:
        with pytest.raises(InvalidPatternError):
            self._load(registry, {"rules": [], "skip": [{"regex": "["}]})


class TestLimits:
    def test_too_many_rules(self, registry: Registry) -> None:
        data = {"rules": [{"literal": "a", "kind": "A"}] * (MAX_RULES + 1)}
        with pytest.raises(TooManyRulesError) as exc_info:
            registry.load_table(parse_lexer_config(data))
        assert exc_info.value.count == MAX_RULES + 1

    def test_at_rule_limit(self, registry: Registry) -> None:
        data = {"rules": [{"literal": "a", "kind": "A"}] * MAX_RULES}
        assert len(registry.load_table(parse_lexer_config(data)).rules) == MAX_RULES

    def test_literal_too_long(self, registry: Registry) -> None:
        data = {"rules": [{"literal": "a" * (MAX_PATTERN_LENGTH + 1), "kind": "A"}]}
        with pytest.raises(PatternTooLongError) as exc_info:
            registry.load_table(parse_lexer_config(data))
        assert exc_info.value.max == MAX_PATTERN_LENGTH

    def test_regex_too_long(self, registry: Registry) -> None:
        data = {"rules": [{"regex": "a" * (MAX_REGEX_PATTERN_LENGTH + 1), "kind": "A"}]}
        with pytest.raises(PatternTooLongError):
            registry.load_table(parse_lexer_config(data))

    def test_too_long_is_invalid_pattern(self) -> None:
        assert issubclass(PatternTooLongError, InvalidPatternError)
