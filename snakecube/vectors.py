# snakecube/vectors.py
from __future__ import annotations
from typing import Iterable, Iterator, Tuple

Cell = Tuple[int, int, int]

ORIGIN: Cell = (0, 0, 0)


def add(a: Cell, b: Cell) -> Cell:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def scale(v: Cell, k: int) -> Cell:
    return (v[0] * k, v[1] * k, v[2] * k)


def in_cube(p: Cell, side: int) -> bool:
    return 0 <= p[0] < side and 0 <= p[1] < side and 0 <= p[2] < side


def as_cell(obj: Iterable) -> Cell:
    """Coerce a JSON-ish [x, y, z] into an integer triple."""
    x, y, z = obj
    return (int(x), int(y), int(z))


def walk(start: Cell, step: Cell, count: int) -> Iterator[Cell]:
    """Yield the `count` cells after `start` along `step` (start excluded)."""
    x, y, z = start
    dx, dy, dz = step
    for _ in range(count):
        x += dx
        y += dy
        z += dz
        yield (x, y, z)


def cube_cells(side: int) -> Iterator[Cell]:
    for z in range(side):
        for y in range(side):
            for x in range(side):
                yield (x, y, z)
