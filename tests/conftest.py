from __future__ import annotations

import itertools
from typing import List, Optional, Tuple

import numpy as np
import pytest

from srflp.engine import Completion, Decision, Problem, Solver
from srflp.generate import GenerationParameters, generate_instance
from srflp.instance import Instance, layout_cost


class ExhaustiveSolver(Solver):
    """Enumerates every path of the problem model; only for tiny instances."""

    def __init__(self, problem: Problem, relaxation=None, ranking=None, width=None, cutoff=None, logger=None):
        self.problem = problem
        self._best: Optional[float] = None
        self._path: Optional[Tuple[Decision, ...]] = None

    def _dfs(self, state, value, path, depth) -> None:
        variable = self.problem.next_variable(depth, [state])
        if variable is None:
            if self.problem.is_terminal(state) and (self._best is None or value > self._best):
                self._best, self._path = value, path
            return
        for v in self.problem.domain(variable, state):
            d = Decision(variable, v)
            self._dfs(self.problem.transition(state, d), value + self.problem.transition_cost(state, d),
                      path + (d,), depth + 1)

    def maximize(self) -> Completion:
        self._dfs(self.problem.initial_state(), self.problem.initial_value(), (), 0)
        return Completion(best_value=self._best, is_exact=True)

    def best_value(self):
        return self._best

    def best_solution(self) -> Optional[List[Decision]]:
        return None if self._path is None else list(self._path)


def brute_force_optimum(instance: Instance):
    return min(layout_cost(instance, p) for p in itertools.permutations(range(instance.n)))


@pytest.fixture
def tiny_instance() -> Instance:
    # lengths 1,2,3; flows f01=1, f02=2, f12=3
    return Instance(
        nb_departments=3,
        lengths=np.array([1, 2, 3]),
        flows=np.array([[0, 1, 2], [1, 0, 3], [2, 3, 0]]),
    )


@pytest.fixture
def generated_instance() -> Instance:
    return generate_instance(GenerationParameters(seed=42, nb_departments=6, nb_clusters=2))


@pytest.fixture
def instance_file(tmp_path, generated_instance):
    path = tmp_path / "instance.json"
    path.write_text(generated_instance.to_json(), encoding="utf-8")
    return path
