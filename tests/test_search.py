import time

import numpy as np
import pytest

from conftest import brute_force_optimum
from srflp.engine import Cutoff, NoCutoff, TimeBudget
from srflp.generate import GenerationParameters, generate_instance
from srflp.heuristics import DepthRanking, FixedWidth, ScaledWidth
from srflp.instance import Instance, layout_cost
from srflp.model import Srflp, SrflpRelax
from srflp.search import BranchAndBoundSolver


def _solver(instance, width, cutoff=None, logger=None):
    problem = Srflp(instance)
    return BranchAndBoundSolver(problem, SrflpRelax(problem), DepthRanking(), width, cutoff or NoCutoff(), logger)


@pytest.mark.parametrize("seed", range(4))
@pytest.mark.parametrize("width", [1, 2, 3])
def test_matches_brute_force_with_narrow_diagrams(seed, width):
    inst = generate_instance(GenerationParameters(seed=seed, nb_departments=6, nb_clusters=2))
    solver = _solver(inst, FixedWidth(width))
    completion = solver.maximize()
    assert completion.is_exact
    optimum = brute_force_optimum(inst)
    assert -completion.best_value == optimum
    order = [d.value for d in sorted(solver.best_solution(), key=lambda d: d.variable)]
    assert layout_cost(inst, order) == optimum


def test_wide_diagram_is_exact_in_one_pass(generated_instance):
    solver = _solver(generated_instance, ScaledWidth(6, 100))
    completion = solver.maximize()
    assert completion.is_exact
    assert solver.explored == 1
    assert -completion.best_value == brute_force_optimum(generated_instance)


def test_solution_is_a_permutation(generated_instance):
    solver = _solver(generated_instance, FixedWidth(2))
    solver.maximize()
    decisions = solver.best_solution()
    assert sorted(d.variable for d in decisions) == list(range(6))
    assert sorted(d.value for d in decisions) == list(range(6))


def test_zero_budget_stops_without_solution(generated_instance):
    solver = _solver(generated_instance, FixedWidth(2), cutoff=TimeBudget(0))
    completion = solver.maximize()
    assert not completion.is_exact
    assert completion.best_value is None
    assert solver.best_solution() is None


def test_events_are_logged(generated_instance):
    events = []
    solver = _solver(generated_instance, FixedWidth(2), logger=events.append)
    solver.maximize()
    names = [e["event"] for e in events]
    assert names[0] == "start"
    assert names[-1] == "end"
    assert "improve" in names
    assert events[-1]["exact"] is True


def test_upper_bound_after_exact_search(generated_instance):
    solver = _solver(generated_instance, FixedWidth(3))
    completion = solver.maximize()
    assert solver.best_upper_bound() == completion.best_value
    assert solver.best_lower_bound() == completion.best_value


class StopAfter(Cutoff):
    """Trips once must_stop() has been asked more than ``calls`` times."""

    def __init__(self, calls):
        self.calls = calls
        self.asked = 0

    def must_stop(self):
        self.asked += 1
        return self.asked > self.calls


def _eight_departments():
    n = 8
    flows = np.array([[0 if i == j else (i * j + i + j) % 7 for j in range(n)] for i in range(n)])
    return Instance(nb_departments=n, lengths=np.array([3, 1, 4, 1, 5, 9, 2, 6]), flows=flows)


def test_cutoff_after_first_dive_keeps_incumbent():
    inst = _eight_departments()
    # the first restricted pass at width 1 asks 17 times; stop during the relaxed pass
    solver = _solver(inst, FixedWidth(1), cutoff=StopAfter(20))
    completion = solver.maximize()
    assert not completion.is_exact
    assert completion.best_value is not None
    decisions = solver.best_solution()
    assert sorted(d.variable for d in decisions) == list(range(8))
    order = [d.value for d in sorted(decisions, key=lambda d: d.variable)]
    assert sorted(order) == list(range(8))
    assert layout_cost(inst, order) == -completion.best_value
    assert solver.best_upper_bound() >= completion.best_value


def test_time_budget_is_honoured_within_a_layer():
    inst = generate_instance(GenerationParameters(seed=5, nb_departments=60, min_length=1000))
    solver = _solver(inst, ScaledWidth(60, 100), cutoff=TimeBudget(0.5))
    start = time.monotonic()
    completion = solver.maximize()
    elapsed = time.monotonic() - start
    assert not completion.is_exact
    assert elapsed < 1.5
