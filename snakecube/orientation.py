# snakecube/orientation.py
from __future__ import annotations
from enum import Enum
from typing import Dict, Optional, Tuple

from snakecube.errors import InvalidChainSpec
from snakecube.vectors import Cell


class Orientation(Enum):
    """Direction a segment points. NONE = no predecessor / rotations used up."""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    FRONT = "front"
    BACK = "back"
    NONE = "none"

    @property
    def step(self) -> Cell:
        return _STEP[self]

    @property
    def axis(self) -> Optional[str]:
        return _AXIS[self]

    @classmethod
    def parse(cls, name) -> "Orientation":
        if isinstance(name, Orientation):
            return name
        if name is None:
            return cls.NONE
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise InvalidChainSpec(f"unknown orientation {name!r}") from None


# Enumeration order; solution order depends on it.
ORDER: Tuple[Orientation, ...] = (
    Orientation.LEFT,
    Orientation.RIGHT,
    Orientation.UP,
    Orientation.DOWN,
    Orientation.FRONT,
    Orientation.BACK,
)

_STEP: Dict[Orientation, Cell] = {
    Orientation.LEFT:  (-1, 0, 0),
    Orientation.RIGHT: (1, 0, 0),
    Orientation.UP:    (0, 0, 1),
    Orientation.DOWN:  (0, 0, -1),
    Orientation.FRONT: (0, -1, 0),
    Orientation.BACK:  (0, 1, 0),
    Orientation.NONE:  (0, 0, 0),
}

_AXIS: Dict[Orientation, Optional[str]] = {
    Orientation.LEFT: "x", Orientation.RIGHT: "x",
    Orientation.UP: "z", Orientation.DOWN: "z",
    Orientation.FRONT: "y", Orientation.BACK: "y",
    Orientation.NONE: None,
}

_POS = {o: i for i, o in enumerate(ORDER)}


def is_turn(prev: Orientation, cur: Orientation) -> bool:
    """True if `cur` may follow `prev` (no straight run, no reversal)."""
    return prev is Orientation.NONE or cur.axis != prev.axis


# prev -> turns it allows, in enumeration order (6 after NONE, 4 otherwise)
_VALID: Dict[Orientation, Tuple[Orientation, ...]] = {
    prev: tuple(o for o in ORDER if is_turn(prev, o)) for prev in Orientation
}


def valid_orientations(prev: Orientation) -> Tuple[Orientation, ...]:
    return _VALID[prev]


def first_orientation(prev: Orientation) -> Orientation:
    return valid_orientations(prev)[0]


def next_orientation(current: Orientation, prev: Orientation) -> Orientation:
    """Next valid orientation after `current`, or NONE once exhausted."""
    if current is Orientation.NONE:
        return Orientation.NONE
    for o in valid_orientations(prev):
        if _POS[o] > _POS[current]:
            return o
    return Orientation.NONE
