"""Single-Row Facility Layout Problem tools.

This package contains modules for generating clustered SRFLP benchmark
instances, reading and writing them, and solving them with a
decision-diagram branch-and-bound search configured with problem-specific
ranking and width heuristics.
"""

from .instance import Instance, InstanceValidationError, layout_cost, read_instance, write_instance
from .rng import expand_seed, seeded_rng
from .generate import GenerationConfigError, GenerationParameters, cluster_sizes, generate_instance
from .engine import Completion, Decision, Problem, Relaxation, Solver, StateRanking, TimeBudget, WidthHeuristic
from .model import Srflp, SrflpRelax, SrflpState
from .heuristics import WIDTH_POLICIES, DepthRanking, FixedWidth, ScaledWidth, build_width
from .search import BranchAndBoundSolver
from .solve import NoSolutionFound, SolveParameters, SolveResult, SolverConfigurator, solve_instance
from .reporting import layout_frame, summarise_runs, write_html_report
from .runner import run_experiments

__all__ = [
    "Instance",
    "InstanceValidationError",
    "read_instance",
    "write_instance",
    "layout_cost",
    "expand_seed",
    "seeded_rng",
    "GenerationConfigError",
    "GenerationParameters",
    "cluster_sizes",
    "generate_instance",
    "Completion",
    "Decision",
    "Problem",
    "Relaxation",
    "Solver",
    "StateRanking",
    "TimeBudget",
    "WidthHeuristic",
    "Srflp",
    "SrflpRelax",
    "SrflpState",
    "WIDTH_POLICIES",
    "DepthRanking",
    "FixedWidth",
    "ScaledWidth",
    "build_width",
    "BranchAndBoundSolver",
    "NoSolutionFound",
    "SolveParameters",
    "SolveResult",
    "SolverConfigurator",
    "solve_instance",
    "layout_frame",
    "summarise_runs",
    "write_html_report",
    "run_experiments",
]
