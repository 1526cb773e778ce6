# src/srflp/search.py
"""Best-first branch-and-bound over decision diagrams.

Each subproblem popped from the fringe is compiled twice, with the layer
width given by the width heuristic:

* a *restricted* diagram keeps only the best-ranked nodes of each layer and
  yields feasible solutions (lower bounds);
* a *relaxed* diagram merges the worst-ranked nodes instead and yields an
  upper bound. Its last exact layer becomes new subproblems, each bounded by
  its best path through the relaxed diagram.

The fringe is ordered by upper bound, then ranking, then value, and holds at
most one entry per state.
"""
from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple

from .engine import (
    Completion,
    Cutoff,
    Decision,
    NoCutoff,
    Problem,
    Relaxation,
    S,
    Solver,
    StateRanking,
    SubProblem,
    WidthHeuristic,
)

NEG_INF = float("-inf")

Logger = Callable[[Dict[str, Any]], None]


@dataclass(eq=False)
class _Node(Generic[S]):
    state: S
    value: float
    path: Tuple[Decision, ...]
    exact: bool = True
    # incoming arcs: (parent, decision, cost)
    parents: List[Tuple["_Node", Decision, float]] = field(default_factory=list)
    value_bot: float = NEG_INF
    merged_into: Optional["_Node"] = None

    def bottom(self) -> float:
        return self.merged_into.value_bot if self.merged_into is not None else self.value_bot


@dataclass
class _Diagram:
    best_value: Optional[float] = None
    best_path: Optional[Tuple[Decision, ...]] = None
    exact: bool = True
    interrupted: bool = False
    cutset: List[_Node] = field(default_factory=list)


class _FringeEntry:
    __slots__ = ("sub", "ranking", "seq", "alive")

    def __init__(self, sub: SubProblem, ranking: StateRanking, seq: int) -> None:
        self.sub = sub
        self.ranking = ranking
        self.seq = seq
        self.alive = True

    def __lt__(self, other: "_FringeEntry") -> bool:
        # heapq pops the smallest entry: "smaller" means more promising
        if self.sub.ub != other.sub.ub:
            return self.sub.ub > other.sub.ub
        cmp = self.ranking.compare(self.sub.state, other.sub.state)
        if cmp != 0:
            return cmp > 0
        if self.sub.value != other.sub.value:
            return self.sub.value > other.sub.value
        return self.seq < other.seq


class BranchAndBoundSolver(Solver, Generic[S]):
    def __init__(
        self,
        problem: Problem[S],
        relaxation: Relaxation[S],
        ranking: StateRanking[S],
        width: WidthHeuristic[S],
        cutoff: Optional[Cutoff] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self.problem = problem
        self.relaxation = relaxation
        self.ranking = ranking
        self.width = width
        self.cutoff = cutoff or NoCutoff()
        self.logger = logger

        self._fringe: List[_FringeEntry] = []
        self._index: Dict[Any, _FringeEntry] = {}
        self._seq = itertools.count()
        self._best_value: Optional[float] = None
        self._best_path: Optional[Tuple[Decision, ...]] = None
        self._upper_bound = float("inf")
        self.explored = 0

        self._node_order = cmp_to_key(self._compare_nodes)

    def _log(self, event: str, **fields: Any) -> None:
        if self.logger:
            self.logger({"event": event, **fields})

    # ---------- fringe ----------
    def _push(self, sub: SubProblem[S]) -> None:
        known = self._index.get(sub.state)
        if known is not None:
            if known.sub.value >= sub.value:
                return
            known.alive = False
        entry = _FringeEntry(sub, self.ranking, next(self._seq))
        self._index[sub.state] = entry
        heapq.heappush(self._fringe, entry)

    def _pop(self) -> Optional[SubProblem[S]]:
        while self._fringe:
            entry = heapq.heappop(self._fringe)
            if not entry.alive:
                continue
            del self._index[entry.sub.state]
            return entry.sub
        return None

    def _fringe_bound(self) -> float:
        alive = [e.sub.ub for e in self._fringe if e.alive]
        return max(alive) if alive else NEG_INF

    # ---------- incumbent ----------
    def _improve(self, value: Optional[float], path: Optional[Tuple[Decision, ...]]) -> None:
        if value is None or path is None:
            return
        if self._best_value is None or value > self._best_value:
            self._best_value = value
            self._best_path = path
            self._log("improve", best=value, explored=self.explored)

    def _pruned(self, bound: float) -> bool:
        return self._best_value is not None and bound <= self._best_value

    # ---------- diagrams ----------
    def _compare_nodes(self, a: _Node, b: _Node) -> int:
        cmp = self.ranking.compare(a.state, b.state)
        if cmp != 0:
            return -cmp
        return (a.value < b.value) - (a.value > b.value)

    def _merge_layer(self, layer: List[_Node], width: int) -> List[_Node]:
        keep, squash = layer[: width - 1], layer[width - 1:]
        merged_state = self.relaxation.merge([n.state for n in squash])
        # kept apart from any kept node with the same state so exact paths stay exact
        merged = _Node(state=merged_state, value=NEG_INF, path=(), exact=False)
        keep.append(merged)
        for node in squash:
            node.merged_into = merged
            for parent, decision, cost in node.parents:
                arc = self.relaxation.relax(parent.state, node.state, merged_state, decision, cost)
                merged.parents.append((parent, decision, arc))
                if parent.value + arc > merged.value:
                    merged.value = parent.value + arc
                    merged.path = parent.path + (decision,)
        return keep

    def _compile(self, sub: SubProblem[S], width: int, relaxed: bool) -> _Diagram:
        diagram = _Diagram()
        root = _Node(state=sub.state, value=sub.value, path=sub.path)
        current: List[_Node] = [root]
        layers: List[List[_Node]] = [current]
        depth = sub.depth
        last_exact: List[_Node] = current

        while True:
            variable = self.problem.next_variable(depth, [n.state for n in current])
            if variable is None:
                break
            if self.cutoff.must_stop():
                diagram.interrupted = True
                return diagram
            children: Dict[Any, _Node] = {}
            for node in current:
                # one layer can take seconds on wide diagrams
                if self.cutoff.must_stop():
                    diagram.interrupted = True
                    return diagram
                for value in self.problem.domain(variable, node.state):
                    decision = Decision(variable, value)
                    state = self.problem.transition(node.state, decision)
                    cost = self.problem.transition_cost(node.state, decision)
                    child = children.get(state)
                    if child is None:
                        child = _Node(state=state, value=node.value + cost,
                                      path=node.path + (decision,), exact=node.exact)
                        children[state] = child
                    else:
                        child.exact = child.exact and node.exact
                        if node.value + cost > child.value:
                            child.value = node.value + cost
                            child.path = node.path + (decision,)
                    if relaxed:
                        child.parents.append((node, decision, cost))
            if not children:
                break
            layer = list(children.values())
            if len(layer) > width:
                layer.sort(key=self._node_order)
                diagram.exact = False
                if relaxed:
                    if len(last_exact) == 1 and last_exact[0] is root:
                        # progress: never hand the popped node back to the fringe
                        last_exact = list(layer)
                    layer = self._merge_layer(layer, width)
                else:
                    layer = layer[:width]
            if relaxed and all(n.exact for n in layer):
                last_exact = layer
            current = layer
            layers.append(current)
            depth += 1

        terminals = [n for n in current if self.problem.is_terminal(n.state)]
        if terminals:
            best = max(terminals, key=lambda n: n.value)
            diagram.best_value, diagram.best_path = best.value, best.path
        if relaxed and not diagram.exact:
            for n in terminals:
                n.value_bot = 0.0
            for layer in reversed(layers):
                for node in layer:
                    if node.value_bot == NEG_INF:
                        continue
                    for parent, _, cost in node.parents:
                        parent.value_bot = max(parent.value_bot, node.value_bot + cost)
            diagram.cutset = last_exact
        return diagram

    # ---------- main loop ----------
    def maximize(self) -> Completion:
        self.cutoff.start()
        root = SubProblem(
            state=self.problem.initial_state(),
            value=self.problem.initial_value(),
            path=(),
            ub=float("inf"),
            depth=0,
        )
        self._push(root)
        self._log("start", nb_variables=self.problem.nb_variables())

        is_exact = True
        while True:
            if self.cutoff.must_stop():
                is_exact = False
                self._log("time_stop", explored=self.explored, best=self._best_value)
                break
            sub = self._pop()
            if sub is None:
                break
            if self._pruned(sub.ub):
                continue
            self.explored += 1
            width = max(1, int(self.width.max_width(sub)))

            restricted = self._compile(sub, width, relaxed=False)
            if restricted.interrupted:
                self._push(sub)
                continue
            self._improve(restricted.best_value, restricted.best_path)
            self._log("restricted", depth=sub.depth, exact=restricted.exact, best=restricted.best_value)
            if restricted.exact:
                continue

            relaxed = self._compile(sub, width, relaxed=True)
            if relaxed.interrupted:
                self._push(sub)
                continue
            self._log("relaxed", depth=sub.depth, exact=relaxed.exact, bound=relaxed.best_value)
            if relaxed.exact:
                self._improve(relaxed.best_value, relaxed.best_path)
                continue
            if relaxed.best_value is None or self._pruned(relaxed.best_value):
                continue
            for node in relaxed.cutset:
                ub = min(sub.ub, node.value + node.bottom())
                if ub == NEG_INF or self._pruned(ub):
                    continue
                self._push(SubProblem(state=node.state, value=node.value, path=node.path,
                                      ub=ub, depth=sub.depth + len(node.path) - len(sub.path)))

        if is_exact:
            self._fringe.clear()
            self._index.clear()
            self._upper_bound = self._best_value if self._best_value is not None else NEG_INF
        else:
            best = NEG_INF if self._best_value is None else self._best_value
            self._upper_bound = max(self._fringe_bound(), best)
        self._log("end", best=self._best_value, exact=is_exact, explored=self.explored)
        return Completion(best_value=self._best_value, is_exact=is_exact)

    def best_value(self) -> Optional[float]:
        return self._best_value

    def best_solution(self) -> Optional[List[Decision]]:
        return None if self._best_path is None else list(self._best_path)

    def best_upper_bound(self) -> float:
        return self._upper_bound


__all__ = ["BranchAndBoundSolver"]
