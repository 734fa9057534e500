# snakecube/search.py
# Snake cube search engine: iterative depth-first backtracking over segment
# orientations. One engine owns one grid + one segment array; every run
# (one starting seed) resets both.
#
# Per chain position the state is unattempted / placed / exhausted:
#   segments[:cursor]  locked in the grid
#   segments[cursor]   being tried (orientation NONE == exhausted)
#   segments[cursor+1:] untouched since the last time they were reached

from __future__ import annotations
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Tuple

from snakecube.chain import ChainSpec, Seed, check_seeds, check_side
from snakecube.errors import InvariantViolation
from snakecube.grid import OccupancyGrid
from snakecube.orientation import Orientation
from snakecube.placement import place, release
from snakecube.segment import Segment
from snakecube.vectors import Cell

StopCheck = Callable[[], bool]

STATUS_IDLE      = "idle"
STATUS_RUNNING   = "running"
STATUS_EXHAUSTED = "exhausted"
STATUS_STOPPED   = "stopped"
STATUS_CAPPED    = "capped"


@dataclass(frozen=True)
class Placement:
    index: int
    start: Cell
    end: Cell
    orientation: Orientation

    def as_dict(self) -> dict:
        return {
            "index": self.index,
            "start": list(self.start),
            "end": list(self.end),
            "orientation": self.orientation.value,
        }


@dataclass(frozen=True)
class Solution:
    seed: Seed
    placements: Tuple[Placement, ...]
    number: int = 0        # 1-based within its run
    positions: int = 0     # positions considered when it was found

    def orientations(self) -> Tuple[Orientation, ...]:
        return tuple(p.orientation for p in self.placements)

    def cells(self) -> List[Cell]:
        """Every cell of the folded chain, in chain order, shared cells once."""
        out = [self.placements[0].start] if self.placements else []
        for p in self.placements:
            step = p.orientation.step
            c = p.start
            while c != p.end:
                c = (c[0] + step[0], c[1] + step[1], c[2] + step[2])
                out.append(c)
        return out

    def as_dict(self) -> dict:
        return {
            "seed": self.seed.label(),
            "number": self.number,
            "positions": self.positions,
            "segments": [p.as_dict() for p in self.placements],
        }


@dataclass
class RunReport:
    seed: Seed
    status: str
    solutions: List[Solution] = field(default_factory=list)
    positions: int = 0
    best_depth: int = 0
    elapsed: float = 0.0


class SearchEngine:
    """
    Inputs:
      - chain: ChainSpec (segment lengths)
      - side:  cube side length

    Maintains search state and stats during a run. Not thread-safe; use one
    engine per worker.
    """

    def __init__(self, chain: ChainSpec, side: int):
        self.chain = chain
        self.side = check_side(side)
        self.grid = OccupancyGrid(self.side)
        self.segments: List[Segment] = [Segment(i, n) for i, n in enumerate(chain)]

        # State
        self.seed: Optional[Seed] = None
        self.cursor = -1
        self.status = STATUS_IDLE

        # Perf counters (positions never resets: monotonic over the engine's life)
        self.positions = 0
        self.positions_this_run = 0
        self.solutions_found = 0
        self.best_depth = 0
        self._t0 = time.time()

    # --------------------------
    # Public helpers
    # --------------------------
    def placed_count(self) -> int:
        return max(self.cursor, 0)

    def total_segments(self) -> int:
        return len(self.segments)

    def elapsed_seconds(self) -> float:
        return time.time() - self._t0

    @property
    def running(self) -> bool:
        return self.status == STATUS_RUNNING

    # --------------------------
    # Run lifecycle
    # --------------------------
    def reset(self, seed: Seed) -> None:
        """Clear all run state and pin segment 0 at the seed."""
        if self.running:
            raise InvariantViolation("reset while a run is in progress")
        check_seeds([seed], self.side)
        self.grid.clear()
        for seg in self.segments:
            seg.locked = False
        self.seed = seed
        self.grid.mark(seed.point)

        first = self.segments[0]
        first.set_start(seed.point, Orientation.NONE)
        if seed.orientation is not Orientation.NONE:
            first.aim(seed.orientation)

        self.cursor = 0
        self.positions_this_run = 0
        self.solutions_found = 0
        self.best_depth = 0
        self._t0 = time.time()
        self.status = STATUS_RUNNING

    def _finish(self, status: str) -> None:
        self.grid.unmark(self.seed.point)
        if self.grid.count != 0:
            raise InvariantViolation(f"{self.grid.count} cells still occupied after the run")
        self.cursor = -1
        self.status = status

    def stop(self, status: str = STATUS_STOPPED) -> None:
        """Abandon the run: release locked segments top-down and clear the seed cell."""
        if not self.running:
            return
        for seg in reversed(self.segments[:max(self.cursor, 0)]):
            release(self.grid, seg)
        self._finish(status)

    # --------------------------
    # One search step
    # --------------------------
    def step_once(self) -> Optional[Solution]:
        """
        Either attempt a placement at the cursor or retreat one position.
        Returns the Solution when the attempt completed the chain and filled
        the cube, else None.
        """
        if self.cursor < 0:
            return None
        seg = self.segments[self.cursor]

        if seg.exhausted:
            self._retreat()
            return None

        self.positions += 1
        self.positions_this_run += 1

        if not place(self.grid, seg):
            seg.rotate()
            return None

        self.cursor += 1
        if self.cursor > self.best_depth:
            self.best_depth = self.cursor

        if self.cursor == len(self.segments):
            solution = None
            # A chain shorter than the cube volume can finish without filling it.
            if self.grid.is_full():
                self.solutions_found += 1
                solution = self._capture()
            # Keep searching: the last segment rotates on.
            self.cursor -= 1
            release(self.grid, seg)
            seg.rotate()
            return solution

        self.segments[self.cursor].set_start(seg.end, seg.orientation)
        return None

    def _retreat(self) -> None:
        self.cursor -= 1
        if self.cursor < -1:
            raise InvariantViolation(f"cursor fell to {self.cursor}")
        if self.cursor < 0:
            self._finish(STATUS_EXHAUSTED)
            return
        seg = self.segments[self.cursor]
        release(self.grid, seg)
        seg.rotate()

    def _capture(self) -> Solution:
        placements = tuple(
            Placement(s.index, s.start, s.end, s.orientation) for s in self.segments
        )
        return Solution(self.seed, placements, self.solutions_found, self.positions_this_run)

    # --------------------------
    # Drivers
    # --------------------------
    def solutions(self,
                  seed: Seed,
                  should_stop: Optional[StopCheck] = None,
                  max_results: Optional[int] = None) -> Iterator[Solution]:
        """
        Lazily yield every folding reachable from `seed`, in enumeration order.
        `should_stop` is polled before each step. Closing the generator early
        unwinds the run cleanly.
        """
        self.reset(seed)
        try:
            while self.cursor >= 0:
                if should_stop is not None and should_stop():
                    self.stop(STATUS_STOPPED)
                    break
                sol = self.step_once()
                if sol is not None:
                    yield sol
                    if max_results is not None and self.solutions_found >= max_results:
                        self.stop(STATUS_CAPPED)
                        break
        finally:
            self.stop(STATUS_STOPPED)

    def run(self,
            seed: Seed,
            should_stop: Optional[StopCheck] = None,
            max_results: Optional[int] = None,
            on_solution: Optional[Callable[[Solution], None]] = None) -> RunReport:
        found: List[Solution] = []
        for sol in self.solutions(seed, should_stop=should_stop, max_results=max_results):
            found.append(sol)
            if on_solution is not None:
                on_solution(sol)
        return RunReport(
            seed=seed,
            status=self.status,
            solutions=found,
            positions=self.positions_this_run,
            best_depth=self.best_depth,
            elapsed=self.elapsed_seconds(),
        )

    # --------------------------
    # Consistency check (tests / --paranoid)
    # --------------------------
    def check_invariants(self) -> None:
        if not self.running:
            if self.grid.count != 0:
                raise InvariantViolation("idle engine with occupied cells")
            return
        if not (0 <= self.cursor <= len(self.segments)):
            raise InvariantViolation(f"cursor {self.cursor} out of range")
        grid = self.grid
        expected = grid.mask_of([self.seed.point])
        total = 1
        for i, seg in enumerate(self.segments):
            if seg.locked != (i < self.cursor):
                raise InvariantViolation(f"segment {i} lock state out of step with cursor {self.cursor}")
            if seg.locked:
                mask = grid.mask_of(seg.span())
                expected |= mask
                total += bin(mask).count("1")
        if expected != grid.occ_bits:
            raise InvariantViolation("grid cells differ from the union of locked segments")
        if total != grid.count:
            raise InvariantViolation("locked segments overlap")


def solve_seed(chain: ChainSpec,
               side: int,
               seed: Seed,
               should_stop: Optional[StopCheck] = None,
               max_results: Optional[int] = None) -> RunReport:
    """One independent run on a fresh engine."""
    return SearchEngine(chain, side).run(seed, should_stop=should_stop, max_results=max_results)
