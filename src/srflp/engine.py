"""Abstractions shared by the search engine and the problem it solves.

The solver driver only talks to the engine through the interfaces below, so
any engine honouring them (the branch-and-bound in :mod:`srflp.search`, the
exhaustive search used by the tests, ...) can be plugged in unchanged.
Engines are framed as maximisers: minimisation problems negate their costs.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

S = TypeVar("S")

Variable = int


@dataclass(frozen=True)
class Decision:
    """Assign ``value`` to ``variable`` (here: put a department at a position)."""

    variable: Variable
    value: int


@dataclass
class SubProblem(Generic[S]):
    """A node of the search: a state reached by ``path`` with objective ``value``."""

    state: S
    value: float
    path: Tuple[Decision, ...] = ()
    ub: float = float("inf")
    depth: int = 0


@dataclass(frozen=True)
class Completion:
    """Outcome of a search.

    ``best_value`` is ``None`` when no complete solution was found;
    ``is_exact`` tells whether the search was carried out to the end.
    """

    best_value: Optional[float]
    is_exact: bool


class Problem(ABC, Generic[S]):
    """Dynamic-programming model of the problem being maximised."""

    @abstractmethod
    def nb_variables(self) -> int:
        """Number of decisions needed to build a complete solution."""

    @abstractmethod
    def initial_state(self) -> S:
        ...

    @abstractmethod
    def initial_value(self) -> float:
        ...

    @abstractmethod
    def next_variable(self, depth: int, states: Sequence[S]) -> Optional[Variable]:
        """Variable to branch on below a layer at ``depth``; ``None`` when done."""

    @abstractmethod
    def domain(self, variable: Variable, state: S) -> Iterable[int]:
        ...

    @abstractmethod
    def transition(self, state: S, decision: Decision) -> S:
        ...

    @abstractmethod
    def transition_cost(self, state: S, decision: Decision) -> float:
        """Objective increment of ``decision``, already sign-adjusted for maximisation."""

    def is_terminal(self, state: S) -> bool:
        return getattr(state, "depth") == self.nb_variables()


class Relaxation(ABC, Generic[S]):
    """Merge operator used to keep decision-diagram layers within their width."""

    @abstractmethod
    def merge(self, states: Sequence[S]) -> S:
        """Return one state admitting every completion admitted by ``states``."""

    def relax(self, source: S, dest: S, merged: S, decision: Decision, cost: float) -> float:
        """Adjust the cost of an arc redirected from ``dest`` to ``merged``."""
        return cost


class StateRanking(ABC, Generic[S]):
    """Orders states by how promising they look; larger means better."""

    @abstractmethod
    def compare(self, a: S, b: S) -> int:
        ...


class WidthHeuristic(ABC, Generic[S]):
    @abstractmethod
    def max_width(self, subproblem: SubProblem[S]) -> int:
        """Maximum number of nodes per layer when compiling below ``subproblem``."""


class Cutoff(ABC):
    def start(self) -> None:
        """Called once when the search begins."""

    @abstractmethod
    def must_stop(self) -> bool:
        ...


class NoCutoff(Cutoff):
    def must_stop(self) -> bool:
        return False


class TimeBudget(Cutoff):
    """Wall-clock cutoff, counted from :meth:`start`."""

    def __init__(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("time budget must be non-negative")
        self.seconds = float(seconds)
        self._deadline: Optional[float] = None

    def start(self) -> None:
        self._deadline = time.monotonic() + self.seconds

    def must_stop(self) -> bool:
        if self._deadline is None:
            self.start()
        return time.monotonic() >= self._deadline


class Solver(ABC):
    """Search engine surface consumed by the solver driver."""

    @abstractmethod
    def maximize(self) -> Completion:
        ...

    @abstractmethod
    def best_value(self) -> Optional[float]:
        ...

    @abstractmethod
    def best_solution(self) -> Optional[List[Decision]]:
        ...

    def best_lower_bound(self) -> float:
        value = self.best_value()
        return float("-inf") if value is None else value

    def best_upper_bound(self) -> float:
        return float("inf")


__all__ = [
    "Completion",
    "Cutoff",
    "Decision",
    "NoCutoff",
    "Problem",
    "Relaxation",
    "Solver",
    "StateRanking",
    "SubProblem",
    "TimeBudget",
    "Variable",
    "WidthHeuristic",
]
