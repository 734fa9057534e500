# snakecube/components.py
from __future__ import annotations
import hashlib
import itertools
from typing import Dict, Iterable, List, Sequence, Tuple

from snakecube.chain import Seed
from snakecube.orientation import Orientation
from snakecube.vectors import Cell, cube_cells

Transform = Tuple[Tuple[int, int, int], Tuple[int, int, int]]

# --- cube symmetry transforms (24 rotations, optional mirrors) ---

def _perm_parity(perm: Tuple[int, int, int]) -> int:
    inv = 0
    p = list(perm)
    for i in range(3):
        for j in range(i + 1, 3):
            if p[i] > p[j]:
                inv += 1
    return 1 if (inv % 2 == 0) else -1

def generate_transforms(include_mirror: bool) -> List[Transform]:
    mats = []
    for perm in itertools.permutations((0, 1, 2), 3):
        parity = _perm_parity(perm)
        for signs in itertools.product((-1, 1), repeat=3):
            det = parity * signs[0] * signs[1] * signs[2]
            if det == 1 or (include_mirror and det == -1):
                mats.append((perm, signs))
    # unique, stable
    return list(dict.fromkeys(mats))

def apply_transform(p: Cell, tfm: Transform) -> Cell:
    perm, signs = tfm
    return (
        signs[0] * p[perm[0]],
        signs[1] * p[perm[1]],
        signs[2] * p[perm[2]],
    )

def transform_in_cube(p: Cell, tfm: Transform, side: int) -> Cell:
    """Apply tfm about the cube centre; the result stays inside [0, side)^3."""
    m = side - 1
    # doubled coordinates keep the centre on the integer lattice
    c = (2 * p[0] - m, 2 * p[1] - m, 2 * p[2] - m)
    t = apply_transform(c, tfm)
    return ((t[0] + m) // 2, (t[1] + m) // 2, (t[2] + m) // 2)

# --- starting seeds ---

def unique_start_points(side: int, include_mirror: bool = True) -> List[Cell]:
    """
    One representative per orbit of the cube's cells under its symmetry
    group, each the lexicographically smallest member of its orbit.
    For side 4: corner, edge, face and interior cells.
    """
    tfms = generate_transforms(include_mirror)
    reps = set()
    for p in cube_cells(side):
        reps.add(min(transform_in_cube(p, t, side) for t in tfms))
    return sorted(reps)

def default_seeds(side: int) -> List[Seed]:
    return [Seed(p, Orientation.NONE) for p in unique_start_points(side)]

# --- solution identity ---

def canonical_cells(cells: Sequence[Cell], side: int, include_mirror: bool = True) -> Tuple[Cell, ...]:
    """Smallest image of an ordered cell path under the cube's symmetries."""
    best = None
    for tfm in generate_transforms(include_mirror):
        tup = tuple(transform_in_cube(c, tfm, side) for c in cells)
        if best is None or tup < best:
            best = tup
    return best

def solution_signature(cells: Iterable[Cell]) -> str:
    s = ";".join(f"{x},{y},{z}" for (x, y, z) in cells)
    return hashlib.sha256(s.encode("utf-8")).hexdigest()

def canonical_signature(cells: Sequence[Cell], side: int, include_mirror: bool = True) -> str:
    return solution_signature(canonical_cells(cells, side, include_mirror))

class SymmetryFilter:
    """Drops solutions that are a rotation/reflection of one already seen."""

    def __init__(self, side: int, include_mirror: bool = True):
        self.side = side
        self.include_mirror = include_mirror
        self.seen: Dict[str, int] = {}

    def admit(self, cells: Sequence[Cell]) -> bool:
        sig = canonical_signature(cells, self.side, self.include_mirror)
        if sig in self.seen:
            self.seen[sig] += 1
            return False
        self.seen[sig] = 1
        return True
