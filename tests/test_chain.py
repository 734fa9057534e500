import json

import pytest

from snakecube.chain import ChainSpec, Seed, load_chain, parse_seed
from snakecube.errors import InvalidChainSpec
from snakecube.orientation import Orientation


def test_cell_count_shares_joints():
    c = ChainSpec((3, 2, 3))
    assert c.cell_count() == 6
    assert len(c) == 3 and list(c) == [3, 2, 3]
    assert ChainSpec((2,) * 7).fills(2)


@pytest.mark.parametrize("lengths", [(), (2, 0, 2), (2, -1), (2, "3"), (True, 2)])
def test_invalid_chain_fails_fast(lengths):
    with pytest.raises(InvalidChainSpec):
        ChainSpec(lengths)


def test_of_accepts_integral_floats():
    assert ChainSpec.of([2.0, 3]).lengths == (2, 3)
    with pytest.raises(InvalidChainSpec):
        ChainSpec.of([2.5])


def test_parse_seed_forms():
    assert parse_seed({"point": [1, 2, 3], "orientation": "up"}) == Seed((1, 2, 3), Orientation.UP)
    assert parse_seed([0, 0, 0]) == Seed((0, 0, 0), Orientation.NONE)
    with pytest.raises(InvalidChainSpec):
        parse_seed({"point": [1, 2]})
    assert Seed((0, 1, 0), Orientation.LEFT).label() == "0,1,0:left"


def test_load_chain(tmp_path):
    p = tmp_path / "mini.json"
    p.write_text(json.dumps({"side": 2, "lengths": [2, 2], "seeds": [{"point": [1, 1, 1]}]}))
    cf = load_chain(str(p))
    assert cf.name == "mini"
    assert cf.side == 2
    assert cf.chain.lengths == (2, 2)
    assert cf.seeds == [Seed((1, 1, 1))]


def test_load_chain_rejects_bad_input(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"side": 2, "lengths": [2], "seeds": [{"point": [2, 0, 0]}]}))
    with pytest.raises(InvalidChainSpec):
        load_chain(str(p))
    p.write_text(json.dumps({"side": 0, "lengths": [2]}))
    with pytest.raises(InvalidChainSpec):
        load_chain(str(p))
    p.write_text(json.dumps([2, 2]))
    with pytest.raises(InvalidChainSpec):
        load_chain(str(p))
    p.write_text(json.dumps({"side": 2, "lengths": 7}))
    with pytest.raises(InvalidChainSpec):
        load_chain(str(p))
    p.write_text(json.dumps({"side": 2, "lengths": [2] * 7, "seeds": 3}))
    with pytest.raises(InvalidChainSpec):
        load_chain(str(p))


def test_reference_chain_fills_four_cube():
    from snakecube.solver import DEFAULT_CHAIN
    cf = load_chain(DEFAULT_CHAIN)
    assert cf.side == 4
    assert len(cf.chain) == 46
    assert cf.chain.fills(4)
    assert len(cf.seeds) == 4
