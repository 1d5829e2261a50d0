"""
Square Dash Arena Module.

This module implements the arena geometry:
- 9x9 grid bounds
- Live area for a given border size (the arena shrinks one ring at a time)
- Outer perimeter (candidate exit cells)
- Wall cells and masks for rendering and observations
"""
from dataclasses import dataclass
from typing import List, Tuple
import numpy as np

Position = Tuple[int, int]

# Orthogonal neighbour offsets in N, S, W, E order
NEIGHBOR_OFFSETS: Tuple[Position, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def manhattan(a: Position, b: Position) -> int:
    """Manhattan distance between two cells."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def is_adjacent(a: Position, b: Position) -> bool:
    """Check if two cells are orthogonally adjacent."""
    return manhattan(a, b) == 1


@dataclass(frozen=True)
class Arena:
    """
    Square arena of ``size`` x ``size`` cells with ``border`` rings walled off.

    The live area is every cell with row and col in
    ``[border, size - 1 - border]``. Everything outside it is wall.
    """
    size: int = 9
    border: int = 0

    @property
    def center(self) -> Position:
        """Return the centre cell."""
        mid = self.size // 2
        return (mid, mid)

    @property
    def low(self) -> int:
        """Smallest live row/col index."""
        return self.border

    @property
    def high(self) -> int:
        """Largest live row/col index."""
        return self.size - 1 - self.border

    @property
    def is_collapsed(self) -> bool:
        """True once the walls have swallowed every cell."""
        return self.low > self.high

    def in_live_area(self, row: int, col: int) -> bool:
        """Check if a cell is inside the walls."""
        return self.low <= row <= self.high and self.low <= col <= self.high

    def cells(self) -> List[Position]:
        """All cells of the full grid in row-major order."""
        return [(r, c) for r in range(self.size) for c in range(self.size)]

    def perimeter(self) -> List[Position]:
        """
        Distinct cells on the outer ring of the full grid, row-major order.

        The ring is independent of the current border: exits are always
        placed on it.
        """
        last = self.size - 1
        return [
            (r, c) for r, c in self.cells()
            if r in (0, last) or c in (0, last)
        ]

    def wall_cells(self) -> List[Position]:
        """Cells currently outside the live area."""
        return [(r, c) for r, c in self.cells() if not self.in_live_area(r, c)]

    def wall_mask(self) -> np.ndarray:
        """Boolean (size, size) array, True on wall cells."""
        mask = np.ones((self.size, self.size), dtype=bool)
        if not self.is_collapsed:
            mask[self.low:self.high + 1, self.low:self.high + 1] = False
        return mask

    def __repr__(self) -> str:
        return f"Arena(size={self.size}, border={self.border})"
