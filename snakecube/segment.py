# snakecube/segment.py
from __future__ import annotations
from typing import List

from snakecube.errors import InvariantViolation
from snakecube.orientation import Orientation, first_orientation, next_orientation
from snakecube.vectors import ORIGIN, Cell, add, scale, walk


class Segment:
    """
    One straight run of the chain.

    `length` counts the cell shared with the previous segment, so only
    `length - 1` cells (start excluded) belong to this segment in the grid.
    start / orientation only change while unlocked; `end` follows them.
    """

    __slots__ = ("index", "length", "start", "end", "orientation", "prev_orientation", "locked")

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        self.start: Cell = ORIGIN
        self.end: Cell = ORIGIN
        self.orientation = Orientation.NONE
        self.prev_orientation = Orientation.NONE
        self.locked = False

    def __repr__(self) -> str:
        return (f"Segment({self.index}, len={self.length}, {self.start}->{self.end}, "
                f"{self.orientation.value}{', locked' if self.locked else ''})")

    # --------------------------
    # Explicit state changes
    # --------------------------
    def _require_unlocked(self, what: str) -> None:
        if self.locked:
            raise InvariantViolation(f"segment {self.index}: {what} while locked")

    def set_start(self, start: Cell, prev_orientation: Orientation) -> None:
        """Attach to the previous segment's end; orientation restarts at the first turn."""
        self._require_unlocked("set_start")
        self.start = start
        self.prev_orientation = prev_orientation
        self.aim(first_orientation(prev_orientation))

    def aim(self, orientation: Orientation) -> None:
        self._require_unlocked("aim")
        self.orientation = orientation
        self.end = add(self.start, scale(orientation.step, self.length - 1))

    def rotate(self) -> bool:
        """Advance to the next valid orientation. False once exhausted (NONE)."""
        self.aim(next_orientation(self.orientation, self.prev_orientation))
        return self.orientation is not Orientation.NONE

    @property
    def exhausted(self) -> bool:
        return self.orientation is Orientation.NONE

    # --------------------------
    # Geometry
    # --------------------------
    def span(self) -> List[Cell]:
        """Cells this segment reserves: start+step .. end."""
        return list(walk(self.start, self.orientation.step, self.length - 1))

    def cells(self) -> List[Cell]:
        return [self.start] + self.span()
