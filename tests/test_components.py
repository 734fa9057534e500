from snakecube.chain import ChainSpec, Seed
from snakecube.components import (
    SymmetryFilter, apply_transform, canonical_cells, default_seeds, generate_transforms,
    transform_in_cube, unique_start_points,
)
from snakecube.orientation import Orientation
from snakecube.search import SearchEngine


def test_transform_counts():
    assert len(generate_transforms(False)) == 24
    assert len(generate_transforms(True)) == 48
    assert apply_transform((1, 2, 3), ((0, 1, 2), (1, 1, 1))) == (1, 2, 3)


def test_transform_stays_inside_cube():
    for t in generate_transforms(True):
        for p in [(0, 0, 0), (3, 1, 2), (1, 1, 1)]:
            q = transform_in_cube(p, t, 4)
            assert all(0 <= c < 4 for c in q)


def test_unique_start_points():
    assert unique_start_points(1) == [(0, 0, 0)]
    assert unique_start_points(2) == [(0, 0, 0)]
    # corner, edge, face, interior
    assert unique_start_points(3) == [(0, 0, 0), (0, 0, 1), (0, 1, 1), (1, 1, 1)]
    assert unique_start_points(4) == [(0, 0, 0), (0, 0, 1), (0, 1, 1), (1, 1, 1)]
    assert default_seeds(2) == [Seed((0, 0, 0), Orientation.NONE)]


def test_canonical_cells_identifies_mirror_images():
    path = [(0, 0, 0), (1, 0, 0), (1, 1, 0)]
    mirror = [(0, 0, 0), (0, 1, 0), (1, 1, 0)]
    assert canonical_cells(path, 2) == canonical_cells(mirror, 2)
    assert canonical_cells(path, 2) != canonical_cells([(0, 0, 0), (0, 0, 1), (1, 1, 1)], 2)


def test_symmetry_filter_collapses_cube2_solutions():
    sols = list(SearchEngine(ChainSpec((2,) * 7), 2).solutions(Seed((0, 0, 0))))
    f = SymmetryFilter(2)
    kept = [s for s in sols if f.admit(s.cells())]
    assert len(sols) == 18
    assert len(kept) == 3
    assert kept[0] is sols[0]

    rot_only = SymmetryFilter(2, include_mirror=False)
    assert len([s for s in sols if rot_only.admit(s.cells())]) == 6
