"""Conformance fixture loader for sealex.

Loads YAML fixtures from tests/fixtures/ and converts them to a compiled
RuleTable plus expected tokens (or an expected error) per case, for
parametrized testing through the config loading path.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml

from sealex import (
    Field,
    Registry,
    RegistryBuilder,
    RuleTable,
    TokenInfo,
    parse_lexer_config,
    register_core_parsers,
)
from sealex.testing import register

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class FixtureCase:
    """A single test case from a conformance fixture."""

    fixture_name: str
    case_name: str
    table: RuleTable[Any]
    input: str
    expect: list[TokenInfo[Any]] | None
    error: dict[str, Any] | None

    @property
    def id(self) -> str:
        return f"{self.fixture_name}::{self.case_name}"


def make_registry() -> Registry:
    """Registry with the core parsers and the test domain."""
    builder = RegistryBuilder()
    register_core_parsers(builder)
    register(builder)
    return builder.build()


@pytest.fixture
def registry() -> Registry:
    return make_registry()


# ─── YAML → sealex type conversion ──────────────────────────────────────────


def parse_expected_token(spec: dict[str, Any]) -> TokenInfo[Any]:
    """Parse an expected token; a 'value' key means a parser rule's Field."""
    kind = Field(spec["kind"], spec["value"]) if "value" in spec else spec["kind"]
    return TokenInfo(kind, spec["text"], spec["start"], spec["end"])


# ─── Fixture loading ────────────────────────────────────────────────────────


def load_fixtures() -> list[FixtureCase]:
    """Load all conformance fixtures."""
    registry = make_registry()
    cases: list[FixtureCase] = []
    for yaml_file in sorted(FIXTURE_DIR.glob("*.yaml")):
        cases.extend(_load_file(yaml_file, registry))
    return cases


def _load_file(path: Path, registry: Registry) -> list[FixtureCase]:
    """Load a single fixture YAML file (may contain multiple documents)."""
    cases: list[FixtureCase] = []
    with path.open(encoding="utf-8") as f:
        for doc in yaml.safe_load_all(f):
            if doc is None:
                continue
            fixture_name = doc["name"]
            table = registry.load_table(parse_lexer_config(doc["table"]))
            for case in doc["cases"]:
                expect = None
                if "expect" in case:
                    expect = [parse_expected_token(t) for t in case["expect"]]
                cases.append(
                    FixtureCase(
                        fixture_name=fixture_name,
                        case_name=case["name"],
                        table=table,
                        input=case["input"],
                        expect=expect,
                        error=case.get("error"),
                    )
                )
    return cases
