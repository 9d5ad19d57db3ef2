"""Token creators — how matched text becomes a token kind.

Creator is a tagged union of three frozen dataclasses:

| Creator   | Result                                                 |
|-----------|--------------------------------------------------------|
| Unit      | the fixed value, matched text ignored                  |
| Parser    | field constructor applied to the matched text          |
| Skip      | no token; the match is consumed and scanning continues |

A Unit or Parser value of None is still emitted as a token kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sealex._errors import FieldParseError
from sealex._types import TokenCreator

if TYPE_CHECKING:
    from sealex._types import FieldParser


@dataclass(frozen=True, slots=True)
class Unit[T]:
    """Always produce the same token kind."""

    value: T

    def create(self, text: str, start: int, /) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Parser[T]:
    """Build the token kind by calling a field constructor on the matched text.

    With ``with_position`` set, the constructor also receives the byte offset
    where the match began. Any exception it raises is wrapped in
    FieldParseError carrying that offset.
    """

    func: FieldParser[T]
    with_position: bool = False

    def create(self, text: str, start: int, /) -> T:
        try:
            if self.with_position:
                return self.func(text, start)  # type: ignore[call-arg]
            return self.func(text)  # type: ignore[call-arg]
        except Exception as e:
            raise FieldParseError(start, e) from e


@dataclass(frozen=True, slots=True)
class Skip:
    """Consume the match without emitting a token (whitespace, comments)."""

    def create(self, text: str, start: int, /) -> None:
        return None


SKIP = Skip()

type Creator[T] = Unit[T] | Parser[T] | Skip


def creator_of(value: Any) -> Creator[Any]:
    """Coerce a bare token kind into a Unit creator; creators pass through."""
    if isinstance(value, TokenCreator):
        return value
    return Unit(value)
