"""Config types for data-driven rule table construction.

Config-driven construction path:
  dict/YAML → parse_lexer_config() → LexerConfig → Registry.load_table() → RuleTable

Relationship to runtime types:

| Config type     | Runtime type               |
|-----------------|----------------------------|
| LexerConfig     | RuleTable                  |
| RuleConfig      | Rule                       |
| PatternConfig   | LiteralMatcher/RegexMatcher|
| TypedConfig     | registered TokenMatcher    |
| ParserConfig    | Parser creator             |
| SkipConfig      | SkipSpec / Skip creator    |
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sealex._errors import LexError

# ═══════════════════════════════════════════════════════════════════════════════
# Config types (frozen dataclasses)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PatternConfig:
    """Literal or regex pattern text."""

    pattern: str
    is_regex: bool = False


@dataclass(frozen=True, slots=True)
class TypedConfig:
    """Reference to a registered matcher type with its configuration."""

    type_url: str
    config: dict[str, Any] = field(default_factory=dict)


# Built-in pattern or registered custom matcher.
type MatchConfig = PatternConfig | TypedConfig


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Named field parser with its configuration."""

    name: str
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RuleConfig:
    """One token rule.

    ``skip`` set means the match is consumed without a token; otherwise
    ``kind`` names the token and ``parser`` (optional) builds its value.
    """

    match: MatchConfig
    kind: str | None = None
    parser: ParserConfig | None = None
    skip: bool = False


@dataclass(frozen=True, slots=True)
class LexerConfig:
    """Ordered rule and skip configuration for one rule table."""

    rules: tuple[RuleConfig, ...]
    skips: tuple[MatchConfig, ...] = ()


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════

_MATCH_KEYS = ("literal", "regex", "matcher")


class ConfigParseError(LexError):
    """Error parsing a config dict into config types."""


def parse_lexer_config(data: dict[str, Any]) -> LexerConfig:
    """Parse a dict into a LexerConfig.

    This is the main entry point for config loading. Only shape is checked
    here; patterns are compiled and names resolved by Registry.load_table().

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    raw_rules = data.get("rules")
    if raw_rules is None:
        msg = "missing required field 'rules'"
        raise ConfigParseError(msg)
    if not isinstance(raw_rules, list):
        msg = f"'rules' must be a list, got {type(raw_rules).__name__}"
        raise ConfigParseError(msg)

    raw_skips = data.get("skip", [])
    if not isinstance(raw_skips, list):
        msg = f"'skip' must be a list, got {type(raw_skips).__name__}"
        raise ConfigParseError(msg)

    rules = tuple(_parse_rule(r) for r in raw_rules)
    skips = tuple(_parse_match(s, "skip") for s in raw_skips)
    return LexerConfig(rules=rules, skips=skips)


def load_lexer_config(path: str | Path) -> LexerConfig:
    """Read a YAML (or JSON) rule file and parse it.

    Raises:
        ConfigParseError: If the file is not valid YAML or is malformed.
    """
    with Path(path).open(encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f"{path}: {e}"
            raise ConfigParseError(msg) from e
    return parse_lexer_config(data)


def _parse_rule(data: dict[str, Any]) -> RuleConfig:
    """Parse a rule dict.

    Enforces oneof: skip, or kind with an optional parser.
    """
    if not isinstance(data, dict):
        msg = f"rule must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    match = _parse_match(data, "rule")
    skip = data.get("skip", False)
    if not isinstance(skip, bool):
        msg = f"'skip' must be a bool, got {type(skip).__name__}"
        raise ConfigParseError(msg)

    kind = data.get("kind")
    if skip:
        if kind is not None or "parser" in data:
            msg = "skip rule must not set 'kind' or 'parser'"
            raise ConfigParseError(msg)
        return RuleConfig(match=match, skip=True)

    if kind is None:
        msg = "rule missing required field 'kind' (or 'skip: true')"
        raise ConfigParseError(msg)
    if not isinstance(kind, str):
        msg = f"'kind' must be a string, got {type(kind).__name__}"
        raise ConfigParseError(msg)

    parser = None
    if "parser" in data:
        parser = _parse_parser(data["parser"])
    return RuleConfig(match=match, kind=kind, parser=parser)


def _parse_match(data: dict[str, Any], where: str) -> MatchConfig:
    """Parse the pattern part of a rule or skip entry.

    Exactly one of 'literal', 'regex' or 'matcher' must be present.
    """
    if not isinstance(data, dict):
        msg = f"{where} must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    present = [k for k in _MATCH_KEYS if k in data]
    if len(present) != 1:
        msg = f"{where} must contain exactly one of {list(_MATCH_KEYS)}, got {present}"
        raise ConfigParseError(msg)

    key = present[0]
    if key == "matcher":
        return _parse_typed_config(data["matcher"])

    value = data[key]
    if not isinstance(value, str):
        msg = f"{where} {key} value must be a string, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return PatternConfig(pattern=value, is_regex=key == "regex")


def _parse_parser(data: str | dict[str, Any]) -> ParserConfig:
    """Parse a parser reference: a bare name or {name, config}."""
    if isinstance(data, str):
        return ParserConfig(name=data)
    if not isinstance(data, dict):
        msg = f"parser must be a string or dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    name = data.get("name")
    if not isinstance(name, str):
        msg = "parser missing required field 'name' (string)"
        raise ConfigParseError(msg)

    config = data.get("config", {})
    if not isinstance(config, dict):
        msg = f"parser config must be a dict, got {type(config).__name__}"
        raise ConfigParseError(msg)
    return ParserConfig(name=name, config=config)


def _parse_typed_config(data: dict[str, Any]) -> TypedConfig:
    """Parse a typed config dict."""
    if not isinstance(data, dict):
        msg = f"typed_config must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    if "type_url" not in data:
        msg = "typed_config missing required field 'type_url'"
        raise ConfigParseError(msg)

    type_url = data["type_url"]
    if not isinstance(type_url, str):
        msg = f"type_url must be a string, got {type(type_url).__name__}"
        raise ConfigParseError(msg)

    config = data.get("config", {})
    if not isinstance(config, dict):
        msg = f"config must be a dict, got {type(config).__name__}"
        raise ConfigParseError(msg)

    return TypedConfig(type_url=type_url, config=config)
