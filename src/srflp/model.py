# src/srflp/model.py
"""Dynamic-programming model of the SRFLP and its merge operator.

Departments are placed left to right. The order-independent part of the
objective, ``sum_{i<j} f_ij (l_i + l_j) / 2``, goes in the root value; the
rest is paid department by department: a department ``d`` placed between
the already placed set ``P`` and the unplaced set ``U`` adds ``l_d`` times
the flow crossing it, ``sum_{j in U, j != d} cut[j]`` with
``cut[j] = sum_{i in P} f_ij``. Costs are negated because the engine
maximises.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple
import numpy as np

from .engine import Decision, Problem, Relaxation, Variable
from .instance import Instance, InstanceValidationError


@dataclass(frozen=True)
class SrflpState:
    must_place: FrozenSet[int]
    maybe_place: FrozenSet[int]  # empty for exact states
    cut: Tuple[int, ...]
    depth: int


class Srflp(Problem[SrflpState]):
    def __init__(self, instance: Instance) -> None:
        instance.validate()
        if np.any(instance.lengths < 0):
            raise InstanceValidationError("solving requires non-negative department lengths")
        self.instance = instance
        self.n = instance.n
        self.lengths: List[int] = [int(x) for x in instance.lengths]
        self.flows: List[List[int]] = [[int(x) for x in row] for row in instance.flows]
        # python ints: flow * length sums may exceed int64
        doubled = sum(
            self.flows[i][j] * (self.lengths[i] + self.lengths[j])
            for i in range(self.n)
            for j in range(i + 1, self.n)
        )
        self.root_value = -(doubled // 2) if doubled % 2 == 0 else -doubled / 2

    def nb_variables(self) -> int:
        return self.n

    def initial_state(self) -> SrflpState:
        return SrflpState(
            must_place=frozenset(range(self.n)),
            maybe_place=frozenset(),
            cut=(0,) * self.n,
            depth=0,
        )

    def initial_value(self) -> float:
        return self.root_value

    def next_variable(self, depth: int, states: Sequence[SrflpState]) -> Optional[Variable]:
        return depth if depth < self.n else None

    def domain(self, variable: Variable, state: SrflpState) -> Iterable[int]:
        remaining = self.n - state.depth
        if len(state.must_place) >= remaining:
            return sorted(state.must_place)
        return sorted(state.must_place | state.maybe_place)

    def transition(self, state: SrflpState, decision: Decision) -> SrflpState:
        d = decision.value
        row = self.flows[d]
        return SrflpState(
            must_place=state.must_place - {d},
            maybe_place=state.maybe_place - {d},
            cut=tuple(c + f for c, f in zip(state.cut, row)),
            depth=state.depth + 1,
        )

    def transition_cost(self, state: SrflpState, decision: Decision) -> float:
        d = decision.value
        crossing = sum(state.cut[j] for j in state.must_place if j != d)
        return -self.lengths[d] * crossing


class SrflpRelax(Relaxation[SrflpState]):
    """Keep what every merged state must still place and the smallest cuts."""

    def __init__(self, problem: Srflp) -> None:
        self.problem = problem

    def merge(self, states: Sequence[SrflpState]) -> SrflpState:
        if not states:
            raise ValueError("cannot merge an empty set of states")
        depth = states[0].depth
        if any(s.depth != depth for s in states):
            raise ValueError("merged states must share the same depth")
        must = frozenset.intersection(*(s.must_place for s in states))
        union = frozenset.union(*(s.must_place | s.maybe_place for s in states))
        cut = tuple(min(values) for values in zip(*(s.cut for s in states)))
        return SrflpState(must_place=must, maybe_place=union - must, cut=cut, depth=depth)
