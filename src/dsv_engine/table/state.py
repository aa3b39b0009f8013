"""Table coordinates and rectangular selections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Coordinates:
    """Logical address of a body cell, or of a whole row when ``column`` is None.

    Body rows are 0-indexed. Row ``-1`` stands for the header row and only
    appears when a row traversal steps before the first body row.
    """

    row: int
    column: Optional[int] = None

    @property
    def is_row(self) -> bool:
        return self.column is None


@dataclass(frozen=True, slots=True)
class CellSelection:
    """Inclusive rectangle of body cells."""

    start_row: int
    start_column: int
    end_row: int
    end_column: int

    def __post_init__(self) -> None:
        if self.end_row < self.start_row or self.end_column < self.start_column:
            raise ValueError("selection end must not precede its start")

    @property
    def row_span(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def column_span(self) -> int:
        return self.end_column - self.start_column + 1

    def cells_reversed(self) -> Iterator[Tuple[int, int, Coordinates]]:
        """Yield ``(i, j, coords)`` from the bottom-right cell to the top-left."""

        for i in range(self.row_span - 1, -1, -1):
            for j in range(self.column_span - 1, -1, -1):
                yield i, j, Coordinates(self.start_row + i, self.start_column + j)


__all__ = ["Coordinates", "CellSelection"]
