"""Command line entry point: tokenize a file with a YAML/JSON rule table.

Usage:
    sealex RULES [INPUT] [--json] [--verbose]

INPUT defaults to stdin. One line is printed per token; the first lexing
error is reported on stderr with exit status 1.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, TextIO

import click

from sealex._config import load_lexer_config
from sealex._errors import LexError
from sealex._registry import Field, RegistryBuilder, register_core_parsers

if TYPE_CHECKING:
    from sealex._token import TokenInfo


def _format_kind(kind: Any) -> str:
    if isinstance(kind, Field):
        return f"{kind.kind}({kind.value!r})"
    return str(kind)


def _as_json(token: TokenInfo[Any]) -> str:
    record: dict[str, Any] = {
        "start": token.start,
        "end": token.end,
        "text": token.text,
    }
    if isinstance(token.kind, Field):
        record["kind"] = token.kind.kind
        record["value"] = token.kind.value
    else:
        record["kind"] = token.kind
    return json.dumps(record, ensure_ascii=False, default=str)


@click.command()
@click.argument("rules", type=click.Path(exists=True, dir_okay=False))
@click.argument("input_file", metavar="INPUT", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--json", "as_json", is_flag=True, help="Emit one JSON object per token.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(rules: str, input_file: TextIO, as_json: bool, verbose: bool) -> None:
    """Tokenize INPUT with the rule table in RULES."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    registry = register_core_parsers(RegistryBuilder()).build()
    try:
        table = registry.load_table(load_lexer_config(rules))
    except LexError as e:
        raise click.ClickException(f"{rules}: {e}") from e

    source = input_file.read()
    for result in table.lexer(source).results():
        if isinstance(result, LexError):
            raise click.ClickException(str(result))
        if as_json:
            click.echo(_as_json(result))
        else:
            click.echo(f"{result.start}:{result.end} {_format_kind(result.kind)} {result.text!r}")


if __name__ == "__main__":
    main()
