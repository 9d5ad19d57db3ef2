"""Token record produced by the scanning engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TokenInfo[T]:
    """A classified, positioned token.

    ``start`` and ``end`` are UTF-8 byte offsets into the input; ``end`` is
    exclusive, so ``end - start`` equals the encoded length of ``text``.
    """

    kind: T
    text: str
    start: int
    end: int

    @property
    def span(self) -> tuple[int, int]:
        """Half-open ``(start, end)`` byte interval."""
        return (self.start, self.end)

    def __len__(self) -> int:
        return self.end - self.start
