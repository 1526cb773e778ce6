"""Ranking and width heuristics handed to the search engine.

Both heuristics hold only immutable configuration, so one instance can be
shared by every part of the search.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict

from .engine import StateRanking, SubProblem, WidthHeuristic
from .model import SrflpState


class DepthRanking(StateRanking[SrflpState]):
    """Prefer states with more departments already placed."""

    def compare(self, a: SrflpState, b: SrflpState) -> int:
        return (a.depth > b.depth) - (a.depth < b.depth)


class ScaledWidth(WidthHeuristic[SrflpState]):
    """Layer cap of ``nb_vars * factor`` nodes, whatever the subproblem."""

    def __init__(self, nb_vars: int, factor: int) -> None:
        if factor < 1:
            raise ValueError(f"width factor must be positive, got {factor}")
        self.nb_vars = nb_vars
        self.factor = factor

    def max_width(self, subproblem: SubProblem[SrflpState]) -> int:
        return self.nb_vars * self.factor


class FixedWidth(WidthHeuristic[SrflpState]):
    def __init__(self, width: int) -> None:
        if width < 1:
            raise ValueError(f"width must be positive, got {width}")
        self.width = width

    def max_width(self, subproblem: SubProblem[SrflpState]) -> int:
        return self.width


WidthFactory = Callable[[int, int], WidthHeuristic]


@dataclass(frozen=True)
class WidthPolicy:
    key: str
    description: str
    factory: WidthFactory


WIDTH_POLICIES: Dict[str, WidthPolicy] = {
    "scaled": WidthPolicy(
        key="scaled",
        description="width = number of departments x factor",
        factory=lambda nb_vars, width: ScaledWidth(nb_vars, width),
    ),
    "fixed": WidthPolicy(
        key="fixed",
        description="width = value given on the command line",
        factory=lambda nb_vars, width: FixedWidth(width),
    ),
}


def available_width_policies() -> Dict[str, str]:
    return {key: policy.description for key, policy in WIDTH_POLICIES.items()}


def build_width(policy: str, nb_vars: int, width: int) -> WidthHeuristic:
    """Create the width heuristic registered under ``policy``."""

    key = policy.lower()
    if key not in WIDTH_POLICIES:
        raise ValueError(
            f"Unknown width policy '{policy}'. Available policies: {', '.join(sorted(WIDTH_POLICIES))}"
        )
    return WIDTH_POLICIES[key].factory(nb_vars, width)


__all__ = [
    "DepthRanking",
    "FixedWidth",
    "ScaledWidth",
    "WIDTH_POLICIES",
    "available_width_policies",
    "build_width",
]
