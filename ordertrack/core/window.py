from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeVar

INITIAL_VISIBLE = 20
VISIBLE_INCREMENT = 20

T = TypeVar("T")


@dataclass(slots=True)
class ResultWindow:
    """Visible prefix of the current result set.

    The count only grows, one increment per ``grow`` signal, until the
    underlying query changes and ``reset`` starts over.
    """

    count: int = INITIAL_VISIBLE

    def grow(self) -> int:
        self.count += VISIBLE_INCREMENT
        return self.count

    def reset(self) -> int:
        self.count = INITIAL_VISIBLE
        return self.count

    def visible(self, items: Sequence[T]) -> list[T]:
        return list(items[: self.count])

    def has_more(self, total: int) -> bool:
        return self.count < total
