from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

EMPTY = -1

MIN_SIZE = 6
MAX_SIZE = 100


class Board:
    """Grid of counters with gravity drops.

    ``cells[row][column]`` holds ``EMPTY`` or the 0-based index of the player
    owning the counter. Row 0 is the top of the board, so counters settle
    towards ``height - 1``.
    """

    def __init__(self, width: int, height: int) -> None:
        if not (MIN_SIZE <= width <= MAX_SIZE and MIN_SIZE <= height <= MAX_SIZE):
            raise ValueError(
                f"Board must be between {MIN_SIZE} and {MAX_SIZE} cells in each direction, "
                f"got {width}x{height}"
            )
        self.width = width
        self.height = height
        self.cells: List[List[int]] = [[EMPTY] * width for _ in range(height)]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Board":
        """Build a board from explicit rows, top row first."""
        height = len(rows)
        width = len(rows[0]) if rows else 0
        board = cls(width, height)
        for r, row in enumerate(rows):
            if len(row) != width:
                raise ValueError("All rows must have the same length")
            board.cells[r] = [int(v) for v in row]
        return board

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.height and 0 <= column < self.width

    def is_corner(self, row: int, column: int) -> bool:
        return row in (0, self.height - 1) and column in (0, self.width - 1)

    def cell(self, row: int, column: int) -> int:
        return self.cells[row][column]

    def drop(self, column: int, player: int) -> Tuple[int, bool]:
        """Drop a counter for ``player`` into ``column``.

        Returns ``(row, True)`` where the counter settled, or ``(-1, False)``
        when the column is out of range or has no empty cell.
        """
        if column < 0 or column >= self.width:
            return -1, False
        for row in range(self.height - 1, -1, -1):
            if self.cells[row][column] == EMPTY:
                self.cells[row][column] = player
                return row, True
        return -1, False

    def remove(self, row: int, column: int) -> None:
        if self.in_bounds(row, column):
            self.cells[row][column] = EMPTY

    def collapse(self, row: int, column: int) -> None:
        """Remove the counter at ``(row, column)`` and let the column above fall by one."""
        if not self.in_bounds(row, column):
            return
        for r in range(row, 0, -1):
            self.cells[r][column] = self.cells[r - 1][column]
        self.cells[0][column] = EMPTY

    def column_full(self, column: int) -> bool:
        # counters can float over holes left by a bomb
        return self.landing_row(column) is None

    def legal_columns(self) -> List[int]:
        return [c for c in range(self.width) if not self.column_full(c)]

    def landing_row(self, column: int) -> Optional[int]:
        for row in range(self.height - 1, -1, -1):
            if self.cells[row][column] == EMPTY:
                return row
        return None

    def is_full(self) -> bool:
        return all(cell != EMPTY for row in self.cells for cell in row)

    def occupied(self) -> Iterator[Tuple[int, int, int]]:
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                if cell != EMPTY:
                    yield r, c, cell

    def snapshot(self) -> "Board":
        copy = Board.__new__(Board)
        copy.width = self.width
        copy.height = self.height
        copy.cells = [row[:] for row in self.cells]
        return copy

    copy = snapshot

    def key(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(tuple(row) for row in self.cells)

    def to_rows(self) -> List[List[int]]:
        return [row[:] for row in self.cells]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells == other.cells

    def __repr__(self) -> str:
        return f"Board({self.width}x{self.height})"

    def __str__(self) -> str:
        return "\n".join(
            " ".join("." if cell == EMPTY else str(cell) for cell in row) for row in self.cells
        )
