from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

DEFAULT_COLORS: Tuple[str, ...] = ("#06b6d4", "#f59e0b", "#84cc16", "#ec4899", "#8b5cf6")
WITHOUT_PLACE_COLOR = "#ef4444"


@dataclass(frozen=True)
class Palette:
    """Ordered colour list indexed by position, wrapping around when exhausted."""

    colors: Tuple[str, ...] = DEFAULT_COLORS

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("Palette needs at least one colour")

    def __len__(self) -> int:
        return len(self.colors)

    def slot(self, index: int) -> int:
        return index % len(self.colors)

    def color(self, index: int) -> str:
        return self.colors[self.slot(index)]


DEFAULT_PALETTE = Palette()
