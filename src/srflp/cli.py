"""Command-line entry point: ``srflp generate`` and ``srflp solve``."""
from __future__ import annotations

import argparse
import json
import sys
from typing import IO, List, Optional

from .generate import GenerationParameters, generate_instance
from .heuristics import WIDTH_POLICIES
from .instance import read_instance, write_instance
from .reporting import write_html_report
from .solve import NoSolutionFound, SolveParameters, SolverConfigurator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="srflp", description="Single-Row Facility Layout Problem tools")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a synthetic clustered instance")
    gen.add_argument("-s", "--seed", type=int, default=None, help="Optional 128-bit seed")
    gen.add_argument("-n", "--nb-departments", type=int, default=10, help="Number of departments to place")
    gen.add_argument("-c", "--nb-clusters", type=int, default=3, help="Number of clusters of similar departments")
    gen.add_argument("--min-length", type=int, default=100,
                     help="Lower bound of cluster centroids; lengths are sampled around them "
                          "and may fall below it, even below zero (solve rejects negative lengths)")
    gen.add_argument("--max-length", type=int, default=10000)
    gen.add_argument("--length-std-dev", type=int, default=100, help="Std deviation of lengths within a cluster")
    gen.add_argument("--min-flow-position", type=int, default=100)
    gen.add_argument("--max-flow-position", type=int, default=10000)
    gen.add_argument("--flow-position-std-dev", type=int, default=100,
                     help="Std deviation of flow positions within a cluster")
    gen.add_argument("-o", "--output", type=str, default=None, help="Output file (stdout when omitted)")

    sol = sub.add_parser("solve", help="Solve an instance with decision-diagram branch-and-bound")
    sol.add_argument("-i", "--instance", type=str, required=True, help="Path to the instance file")
    sol.add_argument("-w", "--width", type=int, default=100, help="Layer width (factor for the scaled policy)")
    sol.add_argument("-t", "--timeout", type=float, default=60.0, help="Time limit in seconds")
    sol.add_argument("--width-policy", type=str, default="scaled", choices=sorted(WIDTH_POLICIES))
    sol.add_argument("-o", "--output", type=str, default=None, help="Optional HTML report path")
    sol.add_argument("--trace", type=str, default=None, help="Write search events as JSON lines")
    return parser


def _generate(args: argparse.Namespace) -> int:
    params = GenerationParameters(
        seed=args.seed,
        nb_departments=args.nb_departments,
        nb_clusters=args.nb_clusters,
        min_length=args.min_length,
        max_length=args.max_length,
        length_std_dev=args.length_std_dev,
        min_flow_position=args.min_flow_position,
        max_flow_position=args.max_flow_position,
        flow_position_std_dev=args.flow_position_std_dev,
    )
    instance = generate_instance(params)
    write_instance(instance, args.output)
    return 0


def _solve(args: argparse.Namespace) -> int:
    instance = read_instance(args.instance)
    params = SolveParameters(width=args.width, timeout=args.timeout, width_policy=args.width_policy).validate()

    trace: Optional[IO[str]] = None
    logger = None
    if args.trace:
        trace = open(args.trace, "w", encoding="utf-8")

        def _logger(ev: dict) -> None:
            trace.write(json.dumps(ev) + "\n"); trace.flush()
        logger = _logger

    try:
        result = SolverConfigurator(instance, params, logger=logger).run()
    except NoSolutionFound as e:
        print(f"is exact {str(e.is_exact).lower()}")
        print("best value none")
        print("no solution found")
        return 1
    finally:
        if trace is not None:
            trace.close()

    if args.output:
        write_html_report(instance, result, args.output)
    print(f"is exact {str(result.is_exact).lower()}")
    print(f"best value {result.best_value}")
    print("solution: " + " ".join(str(d) for d in result.solution))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        if args.command == "generate":
            return _generate(args)
        return _solve(args)
    except (ValueError, OSError) as e:
        # GenerationConfigError and InstanceValidationError are ValueErrors
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
