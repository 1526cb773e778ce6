"""Configure the decision-diagram search for an SRFLP instance and run it."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from .engine import Solver, TimeBudget
from .heuristics import DepthRanking, build_width, WIDTH_POLICIES
from .instance import Instance
from .model import Srflp, SrflpRelax
from .search import BranchAndBoundSolver

Logger = Callable[[Dict[str, Any]], None]
Number = Union[int, float]
EngineFactory = Callable[..., Solver]


class NoSolutionFound(RuntimeError):
    """The search stopped before it retained any complete placement."""

    def __init__(self, is_exact: bool, elapsed: float) -> None:
        super().__init__(
            f"no solution found within the time budget ({elapsed:.2f}s elapsed)"
            if not is_exact else "the search finished without any complete solution"
        )
        self.is_exact = is_exact
        self.elapsed = elapsed


@dataclass(frozen=True)
class SolveParameters:
    width: int = 100
    timeout: float = 60.0
    width_policy: str = "scaled"

    def validate(self) -> "SolveParameters":
        if self.width < 1:
            raise ValueError(f"width must be a positive integer, got {self.width}")
        if self.timeout < 0:
            raise ValueError(f"timeout must be non-negative, got {self.timeout}")
        if self.width_policy.lower() not in WIDTH_POLICIES:
            raise ValueError(
                f"Unknown width policy '{self.width_policy}'. "
                f"Available policies: {', '.join(sorted(WIDTH_POLICIES))}"
            )
        return self


@dataclass
class SolveResult:
    best_value: Number
    is_exact: bool
    solution: List[int] = field(default_factory=list)
    elapsed: float = 0.0
    explored: int = 0


def _as_number(value: float) -> Number:
    if float(value).is_integer():
        return int(value)
    return float(value)


class SolverConfigurator:
    """Build the model, relaxation and heuristics, then run the engine once.

    The engine maximises, so the model reports negated costs; :meth:`run`
    negates the engine's best value back into the true minimal cost.

    Parameters
    ----------
    instance:
        The instance to solve.
    params:
        Width, width policy and wall-clock timeout.
    logger:
        Optional callback receiving event dictionaries from the search.
    engine_factory:
        Callable ``(problem, relaxation, ranking, width, cutoff, logger)``
        returning a :class:`~srflp.engine.Solver`. Defaults to
        :class:`~srflp.search.BranchAndBoundSolver`.
    """

    def __init__(
        self,
        instance: Instance,
        params: Optional[SolveParameters] = None,
        logger: Optional[Logger] = None,
        engine_factory: Optional[EngineFactory] = None,
    ) -> None:
        self.instance = instance
        self.params = (params or SolveParameters()).validate()
        self.logger = logger
        self.engine_factory = engine_factory or BranchAndBoundSolver
        self.status = "idle"
        self.problem: Optional[Srflp] = None
        self.relaxation: Optional[SrflpRelax] = None
        self.engine: Optional[Solver] = None

    def _log(self, event: str, **fields: Any) -> None:
        if self.logger:
            self.logger({"event": event, **fields})

    def configure(self) -> "SolverConfigurator":
        if self.status != "idle":
            raise RuntimeError(f"solver already {self.status}")
        self.problem = Srflp(self.instance)
        self.relaxation = SrflpRelax(self.problem)
        ranking = DepthRanking()
        width = build_width(self.params.width_policy, self.problem.nb_variables(), self.params.width)
        cutoff = TimeBudget(self.params.timeout)
        self.engine = self.engine_factory(self.problem, self.relaxation, ranking, width, cutoff, self.logger)
        self.status = "configured"
        self._log("configured", nb_departments=self.instance.n, width=self.params.width,
                  width_policy=self.params.width_policy, timeout=self.params.timeout)
        return self

    def run(self) -> SolveResult:
        if self.status == "idle":
            self.configure()
        if self.status != "configured":
            raise RuntimeError(f"solver already {self.status}")
        assert self.engine is not None
        self.status = "solved"

        start = time.time()
        if self.instance.n == 0:
            self._log("solved", best=0, exact=True, trivial=True)
            return SolveResult(best_value=0, is_exact=True, solution=[], elapsed=0.0)

        completion = self.engine.maximize()
        elapsed = time.time() - start
        decisions = self.engine.best_solution()
        if completion.best_value is None or decisions is None:
            raise NoSolutionFound(completion.is_exact, elapsed)

        best_value = _as_number(-completion.best_value)
        solution = [d.value for d in sorted(decisions, key=lambda d: d.variable)]
        self._log("solved", best=best_value, exact=completion.is_exact, elapsed=elapsed)
        return SolveResult(
            best_value=best_value,
            is_exact=completion.is_exact,
            solution=solution,
            elapsed=elapsed,
            explored=int(getattr(self.engine, "explored", 0)),
        )


def solve_instance(
    instance: Instance,
    params: Optional[SolveParameters] = None,
    logger: Optional[Logger] = None,
) -> SolveResult:
    return SolverConfigurator(instance, params, logger=logger).run()


__all__ = [
    "NoSolutionFound",
    "SolveParameters",
    "SolveResult",
    "SolverConfigurator",
    "solve_instance",
]
