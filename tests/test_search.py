import pytest

from snakecube.chain import ChainSpec, Seed
from snakecube.errors import InvalidChainSpec, InvariantViolation
from snakecube.orientation import Orientation
from snakecube.search import (
    STATUS_CAPPED, STATUS_EXHAUSTED, STATUS_STOPPED, SearchEngine, solve_seed,
)
from snakecube.vectors import cube_cells

O = Orientation
CUBE2 = ChainSpec((2, 2, 2, 2, 2, 2, 2))
CORNER = Seed((0, 0, 0))


def all_solutions(chain, side, seed):
    return list(SearchEngine(chain, side).solutions(seed))


def test_cube2_regression_count():
    sols = all_solutions(CUBE2, 2, CORNER)
    assert len(sols) == 18
    assert [s.number for s in sols] == list(range(1, 19))


def test_cube2_first_solution():
    first = all_solutions(CUBE2, 2, CORNER)[0]
    assert first.orientations() == (O.RIGHT, O.UP, O.LEFT, O.BACK, O.RIGHT, O.DOWN, O.LEFT)
    assert first.cells() == [
        (0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 1),
        (0, 1, 1), (1, 1, 1), (1, 1, 0), (0, 1, 0),
    ]


def test_every_solution_fills_cube_once_and_turns_at_each_joint():
    for sol in all_solutions(CUBE2, 2, CORNER):
        cells = sol.cells()
        assert len(cells) == 8
        assert set(cells) == set(cube_cells(2))
        ors = sol.orientations()
        for a, b in zip(ors, ors[1:]):
            assert a.axis != b.axis
        for prev, cur in zip(sol.placements, sol.placements[1:]):
            assert cur.start == prev.end
        assert sol.placements[0].start == (0, 0, 0)


def test_search_is_deterministic():
    a = [s.placements for s in all_solutions(CUBE2, 2, CORNER)]
    b = [s.placements for s in all_solutions(CUBE2, 2, CORNER)]
    assert a == b
    assert len(set(a)) == len(a)


@pytest.mark.parametrize("orientation,count", [
    (O.NONE, 18), (O.LEFT, 18), (O.RIGHT, 18), (O.UP, 12), (O.FRONT, 6), (O.BACK, 6),
])
def test_seed_orientation_is_where_segment_zero_starts(orientation, count):
    sols = all_solutions(CUBE2, 2, Seed((0, 0, 0), orientation))
    assert len(sols) == count


def test_short_chains_never_report_partial_fills():
    # [2,1,2] covers 3 cells and [2,1] covers 2: neither can fill 8
    for lengths in ((2, 1, 2), (2, 1)):
        eng = SearchEngine(ChainSpec(lengths), 2)
        assert list(eng.solutions(CORNER)) == []
        assert eng.status == STATUS_EXHAUSTED
        assert eng.cursor == -1
        assert eng.grid.count == 0


def test_positions_counts_every_attempt():
    eng = SearchEngine(ChainSpec((2,)), 2)
    assert list(eng.solutions(CORNER)) == []
    # LEFT out, RIGHT in, UP in, DOWN out, FRONT out, BACK in
    assert eng.positions == 6
    assert eng.positions_this_run == 6


def test_positions_monotonic_and_run_terminates():
    eng = SearchEngine(CUBE2, 2)
    eng.reset(CORNER)
    last = eng.positions
    steps = 0
    while eng.cursor >= 0:
        eng.step_once()
        assert eng.positions >= last
        last = eng.positions
        steps += 1
        assert steps < 100000
    assert eng.status == STATUS_EXHAUSTED
    first_run = eng.positions
    list(eng.solutions(CORNER))
    assert eng.positions == 2 * first_run


def test_grid_matches_locked_segments_at_every_step():
    eng = SearchEngine(CUBE2, 2)
    eng.reset(Seed((1, 1, 0)))
    while eng.cursor >= 0:
        eng.check_invariants()
        eng.step_once()
    eng.check_invariants()
    assert eng.grid.count == 0


def test_single_cell_cube():
    sols = all_solutions(ChainSpec((1,)), 1, CORNER)
    assert len(sols) == 6
    assert all(s.cells() == [(0, 0, 0)] for s in sols)


def test_max_results_caps_and_unwinds():
    eng = SearchEngine(CUBE2, 2)
    got = list(eng.solutions(CORNER, max_results=2))
    assert len(got) == 2
    assert eng.status == STATUS_CAPPED
    assert eng.grid.count == 0
    assert all(not s.locked for s in eng.segments)


def test_stop_signal_unwinds_cleanly():
    calls = {"n": 0}

    def stop():
        calls["n"] += 1
        return calls["n"] > 5

    eng = SearchEngine(CUBE2, 2)
    assert list(eng.solutions(CORNER, should_stop=stop)) == []
    assert eng.status == STATUS_STOPPED
    assert eng.grid.count == 0
    assert eng.positions_this_run == 5


def test_closing_generator_unwinds():
    eng = SearchEngine(CUBE2, 2)
    gen = eng.solutions(CORNER)
    next(gen)
    assert eng.grid.count == 8 - 1  # last segment released on emit
    gen.close()
    assert eng.status == STATUS_STOPPED
    assert eng.grid.count == 0
    # engine is reusable after an abandoned run
    assert len(list(eng.solutions(CORNER))) == 18


def test_reset_while_running_is_a_bug():
    eng = SearchEngine(CUBE2, 2)
    eng.reset(CORNER)
    with pytest.raises(InvariantViolation):
        eng.reset(CORNER)


def test_seed_outside_cube_rejected():
    eng = SearchEngine(CUBE2, 2)
    with pytest.raises(InvalidChainSpec):
        list(eng.solutions(Seed((2, 0, 0))))


def test_solve_seed_report():
    rep = solve_seed(CUBE2, 2, CORNER)
    assert rep.status == STATUS_EXHAUSTED
    assert len(rep.solutions) == 18
    assert rep.best_depth == 7
    assert rep.positions > 18
