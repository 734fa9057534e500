# snakecube/grid.py
from __future__ import annotations
from typing import Iterable, List

from snakecube.errors import InvariantViolation
from snakecube.vectors import Cell, in_cube


class OccupancyGrid:
    """
    side**3 filled/empty cells for one search run.

    Cells are packed into a single int bitmask (bit = x + side*(y + side*z)),
    so a whole span is tested or toggled with one mask operation.
    """

    def __init__(self, side: int):
        self.side = int(side)
        self.volume = self.side ** 3
        self.occ_bits = 0
        self.count = 0

    # --------------------------
    # Cell helpers
    # --------------------------
    def in_bounds(self, p: Cell) -> bool:
        return in_cube(p, self.side)

    def index(self, p: Cell) -> int:
        s = self.side
        return p[0] + s * (p[1] + s * p[2])

    def mask_of(self, cells: Iterable[Cell]) -> int:
        mask = 0
        for c in cells:
            mask |= (1 << self.index(c))
        return mask

    def is_occupied(self, p: Cell) -> bool:
        return bool((self.occ_bits >> self.index(p)) & 1)

    def is_free(self, mask: int) -> bool:
        return (self.occ_bits & mask) == 0

    def is_full(self) -> bool:
        return self.count == self.volume

    # --------------------------
    # Mutation
    # --------------------------
    def reserve(self, mask: int) -> None:
        if self.occ_bits & mask:
            raise InvariantViolation("reserve over an occupied cell")
        self.occ_bits |= mask
        self.count += bin(mask).count("1")

    def release(self, mask: int) -> None:
        if (self.occ_bits & mask) != mask:
            raise InvariantViolation("release of a cell that is not occupied")
        self.occ_bits &= ~mask
        self.count -= bin(mask).count("1")

    def mark(self, p: Cell) -> None:
        self.reserve(1 << self.index(p))

    def unmark(self, p: Cell) -> None:
        self.release(1 << self.index(p))

    def clear(self) -> None:
        self.occ_bits = 0
        self.count = 0

    # --------------------------
    # Views
    # --------------------------
    def occupied_cells(self) -> List[Cell]:
        s = self.side
        out = []
        bits = self.occ_bits
        idx = 0
        while bits:
            if bits & 1:
                out.append((idx % s, (idx // s) % s, idx // (s * s)))
            bits >>= 1
            idx += 1
        return out
