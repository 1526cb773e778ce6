import pytest

from srflp.engine import SubProblem
from srflp.heuristics import (
    DepthRanking,
    FixedWidth,
    ScaledWidth,
    available_width_policies,
    build_width,
)
from srflp.model import SrflpState


def _state(depth):
    return SrflpState(frozenset(), frozenset(), (), depth)


def test_depth_ranking_prefers_deeper_states():
    ranking = DepthRanking()
    assert ranking.compare(_state(3), _state(1)) > 0
    assert ranking.compare(_state(1), _state(3)) < 0
    assert ranking.compare(_state(2), _state(2)) == 0


def test_scaled_width_ignores_search_progress():
    width = ScaledWidth(nb_vars=7, factor=3)
    assert width.max_width(SubProblem(_state(0), 0)) == 21
    assert width.max_width(SubProblem(_state(6), -100, depth=6)) == 21


def test_fixed_width():
    assert FixedWidth(5).max_width(SubProblem(_state(2), 0)) == 5


@pytest.mark.parametrize("bad", [0, -3])
def test_width_must_be_positive(bad):
    with pytest.raises(ValueError):
        ScaledWidth(4, bad)
    with pytest.raises(ValueError):
        FixedWidth(bad)


def test_build_width_by_name():
    assert isinstance(build_width("scaled", 4, 2), ScaledWidth)
    assert isinstance(build_width("FIXED", 4, 2), FixedWidth)
    assert build_width("scaled", 4, 2).max_width(SubProblem(_state(0), 0)) == 8
    assert set(available_width_policies()) == {"scaled", "fixed"}


def test_build_width_unknown_policy():
    with pytest.raises(ValueError, match="Available policies"):
        build_width("adaptive", 4, 2)
