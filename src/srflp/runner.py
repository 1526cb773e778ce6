"""Experiment runner: solve a set of instances for several widths."""
from __future__ import annotations

import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .instance import Instance
from .solve import NoSolutionFound, SolveParameters, SolverConfigurator


def run_experiments(
    instances: Dict[str, Instance],
    widths: Sequence[int] = (100,),
    timeout: float = 60.0,
    width_policy: str = "scaled",
    # progress logging
    log_progress: bool = False,
    log_dir: Optional[str] = None,
) -> pd.DataFrame:
    """Solve every instance once per width and collect one row per run.

    With ``log_progress`` and ``log_dir`` set, the search events of each run
    are written to ``<log_dir>/events/<instance>_w<width>.csv``.
    """
    records: List[dict] = []

    events_base: Optional[Path] = None
    if log_progress and log_dir:
        events_base = Path(log_dir) / "events"
        events_base.mkdir(parents=True, exist_ok=True)

    for inst_name, inst in instances.items():
        for width in widths:
            print(f"[{width_policy}:{width}] {inst_name} ({inst.n} departments)", flush=True)
            params = SolveParameters(width=int(width), timeout=timeout, width_policy=width_policy)
            events: List[dict] = []
            start_time = time.time()

            def _logger(event: dict) -> None:
                events.append({**event, "elapsed": time.time() - start_time})

            configurator = SolverConfigurator(inst, params, logger=_logger)
            row = {
                "instance": inst_name,
                "nb_departments": inst.n,
                "width": int(width),
                "width_policy": width_policy,
            }
            try:
                result = configurator.run()
            except NoSolutionFound as e:
                row.update(best_value=None, is_exact=e.is_exact, elapsed=e.elapsed,
                           solution="", explored=None, status="no_solution")
            else:
                row.update(
                    best_value=result.best_value,
                    is_exact=result.is_exact,
                    elapsed=result.elapsed,
                    solution=" ".join(str(d) for d in result.solution),
                    explored=result.explored,
                    status="ok",
                )
            records.append(row)
            print(f"[{width_policy}:{width}] {inst_name} -> {row['best_value']} "
                  f"exact={row['is_exact']} in {row['elapsed']:.2f}s", flush=True)

            if events_base is not None and events:
                out_path = events_base / f"{inst_name}_w{width}.csv"
                pd.DataFrame(events).to_csv(out_path, index=False)

    return pd.DataFrame.from_records(records)
