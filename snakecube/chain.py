# snakecube/chain.py
from __future__ import annotations
import json
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from snakecube.errors import InvalidChainSpec
from snakecube.orientation import Orientation
from snakecube.vectors import Cell, as_cell, in_cube


@dataclass(frozen=True)
class ChainSpec:
    """
    Segment lengths in chain order.

    Each length counts the cell shared with the neighbouring segment, so
    consecutive segments overlap by one cell.
    """
    lengths: Tuple[int, ...]

    def __post_init__(self):
        if not self.lengths:
            raise InvalidChainSpec("chain is empty")
        for i, n in enumerate(self.lengths):
            if isinstance(n, bool) or not isinstance(n, int):
                raise InvalidChainSpec(f"segment {i}: length {n!r} is not an integer")
            if n < 1:
                raise InvalidChainSpec(f"segment {i}: length {n} < 1")

    @classmethod
    def of(cls, lengths: Iterable) -> "ChainSpec":
        out = []
        for n in lengths:
            if isinstance(n, float) and n.is_integer():
                n = int(n)
            out.append(n)
        return cls(tuple(out))

    def __len__(self) -> int:
        return len(self.lengths)

    def __iter__(self):
        return iter(self.lengths)

    def __getitem__(self, i: int) -> int:
        return self.lengths[i]

    def cell_count(self) -> int:
        return sum(self.lengths) - (len(self.lengths) - 1)

    def fills(self, side: int) -> bool:
        return self.cell_count() == side ** 3


@dataclass(frozen=True)
class Seed:
    """Where a run starts: segment 0's start cell and its first orientation to try."""
    point: Cell
    orientation: Orientation = Orientation.NONE

    def label(self) -> str:
        x, y, z = self.point
        return f"{x},{y},{z}:{self.orientation.value}"


@dataclass
class ChainFile:
    name: str
    side: int
    chain: ChainSpec
    seeds: List[Seed] = field(default_factory=list)
    path: Optional[str] = None


def check_side(side) -> int:
    try:
        s = int(side)
    except (TypeError, ValueError):
        raise InvalidChainSpec(f"cube side {side!r} is not an integer") from None
    if s < 1:
        raise InvalidChainSpec(f"cube side {s} < 1")
    return s


def check_seeds(seeds: Sequence[Seed], side: int) -> List[Seed]:
    for sd in seeds:
        if not in_cube(sd.point, side):
            raise InvalidChainSpec(f"seed point {sd.point} outside a {side}-cube")
    return list(seeds)


def parse_seed(obj) -> Seed:
    if isinstance(obj, dict):
        pt = obj.get("point")
        ori = obj.get("orientation")
    else:
        pt, ori = obj, None
    try:
        cell = as_cell(pt)
    except (TypeError, ValueError):
        raise InvalidChainSpec(f"bad seed point {pt!r}") from None
    return Seed(cell, Orientation.parse(ori))


def load_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_chain(path: str) -> ChainFile:
    """
    Read a chain file:
      {"name": "snake4", "side": 4, "lengths": [3, 2, ...],
       "seeds": [{"point": [0, 0, 0], "orientation": "left"}, ...]}   # seeds optional
    """
    data = load_json(path)
    if not isinstance(data, dict) or "lengths" not in data:
        raise InvalidChainSpec(f"{path}: expected an object with 'lengths'")
    name = str(data.get("name") or os.path.splitext(os.path.basename(path))[0])
    side = check_side(data.get("side", 4))
    lengths = data["lengths"]
    if not isinstance(lengths, list):
        raise InvalidChainSpec(f"{path}: 'lengths' must be a list, got {lengths!r}")
    raw_seeds = data.get("seeds") or []
    if not isinstance(raw_seeds, list):
        raise InvalidChainSpec(f"{path}: 'seeds' must be a list, got {raw_seeds!r}")
    chain = ChainSpec.of(lengths)
    seeds = check_seeds([parse_seed(s) for s in raw_seeds], side)
    return ChainFile(name=name, side=side, chain=chain, seeds=seeds, path=path)
