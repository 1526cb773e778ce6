#!/usr/bin/env python3
"""Generate a suite of clustered SRFLP instances into one directory.

One instance is written per (size, clusters, replicate) combination. The
seed of each instance is ``base_seed + k`` where ``k`` counts instances in
generation order, so a suite is fully reproducible from its base seed.

Usage
-----

```
python scripts/generate_suite.py --sizes 8,10,12 --clusters 2,3 --replicates 3 --outdir data/suite
```
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

import pandas as pd
from srflp.generate import GenerationParameters, generate_instance
from srflp.instance import write_instance


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a suite of SRFLP instances")
    parser.add_argument("--sizes", type=str, default="8,10,12", help="Comma-separated department counts")
    parser.add_argument("--clusters", type=str, default="3", help="Comma-separated cluster counts")
    parser.add_argument("--replicates", type=int, default=3)
    parser.add_argument("--base-seed", type=int, default=0)
    parser.add_argument("--min-length", type=int, default=100)
    parser.add_argument("--max-length", type=int, default=10000)
    parser.add_argument("--length-std-dev", type=int, default=100)
    parser.add_argument("--min-flow-position", type=int, default=100)
    parser.add_argument("--max-flow-position", type=int, default=10000)
    parser.add_argument("--flow-position-std-dev", type=int, default=100)
    parser.add_argument("--outdir", type=str, required=True)
    args = parser.parse_args()

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    sizes = [int(x) for x in args.sizes.split(",") if x.strip()]
    clusters = [int(x) for x in args.clusters.split(",") if x.strip()]

    rows = []
    seed = args.base_seed
    for n in sizes:
        for c in clusters:
            for rep in range(args.replicates):
                params = GenerationParameters(
                    seed=seed,
                    nb_departments=n,
                    nb_clusters=c,
                    min_length=args.min_length,
                    max_length=args.max_length,
                    length_std_dev=args.length_std_dev,
                    min_flow_position=args.min_flow_position,
                    max_flow_position=args.max_flow_position,
                    flow_position_std_dev=args.flow_position_std_dev,
                )
                name = f"srflp_n{n}_c{c}_r{rep}"
                write_instance(generate_instance(params), outdir / f"{name}.json")
                rows.append({"instance": name, "nb_departments": n, "nb_clusters": c,
                             "replicate": rep, "seed": seed})
                seed += 1

    pd.DataFrame(rows).to_csv(outdir / "manifest.csv", index=False)
    print(f"Wrote {len(rows)} instances to {outdir}")


if __name__ == "__main__":
    main()
