# snakecube/errors.py
from __future__ import annotations


class SnakeCubeError(Exception):
    pass


class InvalidChainSpec(SnakeCubeError, ValueError):
    """Chain, side or seed input that cannot start a run."""


class InvariantViolation(SnakeCubeError, RuntimeError):
    """Search bookkeeping went out of sync with the grid. Always a bug."""
