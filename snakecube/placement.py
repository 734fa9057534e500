# snakecube/placement.py
from __future__ import annotations

from snakecube.errors import InvariantViolation
from snakecube.grid import OccupancyGrid
from snakecube.orientation import Orientation
from snakecube.segment import Segment


def fits(grid: OccupancyGrid, seg: Segment) -> bool:
    """Bounds + occupancy test for seg's current start/orientation. No mutation."""
    if seg.orientation is Orientation.NONE:
        return False
    # Axis-aligned run: if the end is inside, every cell before it is too.
    if not grid.in_bounds(seg.end):
        return False
    return grid.is_free(grid.mask_of(seg.span()))


def place(grid: OccupancyGrid, seg: Segment) -> bool:
    """
    Try to lock `seg` into `grid`.

    The start cell is never checked or reserved: it belongs to the previous
    segment (or is the seeded cell for segment 0). On failure the grid is
    left untouched.
    """
    if seg.locked:
        raise InvariantViolation(f"segment {seg.index}: place while locked")
    if not fits(grid, seg):
        return False
    grid.reserve(grid.mask_of(seg.span()))
    seg.locked = True
    return True


def release(grid: OccupancyGrid, seg: Segment) -> None:
    """Undo a successful place(). No-op on an unlocked segment."""
    if not seg.locked:
        return
    grid.release(grid.mask_of(seg.span()))
    seg.locked = False
