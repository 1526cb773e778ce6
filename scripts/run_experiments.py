# scripts/run_experiments.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# make src importable
THIS_FILE = Path(__file__).resolve()
ROOT = THIS_FILE.parents[1]
SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from srflp.instance import read_instance
from srflp.reporting import summarise_runs
from srflp.runner import run_experiments


def load_directory(path: Path, wanted: set[str] | None = None, verbose: bool = False) -> dict:
    files = sorted(p for p in path.iterdir() if p.suffix.lower() == ".json")
    if not files:
        raise FileNotFoundError(f"No .json instance files found in {path}")
    out = {}
    for idx, f in enumerate(files, start=1):
        if wanted and f.stem not in wanted:
            continue
        if verbose:
            print(f"[read] {idx}/{len(files)} {f.name}")
        out[f.stem] = read_instance(f)
    return out


def main():
    p = argparse.ArgumentParser()
    # data
    p.add_argument("--instances-dir", type=str, required=True)
    p.add_argument("--instances", type=str, default="", help="Comma-separated instance names to run (subset)")
    # search configuration
    p.add_argument("--widths", type=str, default="1,10,100")
    p.add_argument("--width-policy", type=str, default="scaled")
    p.add_argument("--timeout", type=float, default=60.0, help="seconds per run")
    p.add_argument("--outdir", type=str, default="results")
    p.add_argument("--verbose", action="store_true")
    p.add_argument("--trace", action="store_true", help="write per-run search events into OUTDIR/events/")
    args = p.parse_args()

    outdir = Path(args.outdir); outdir.mkdir(parents=True, exist_ok=True)
    wanted = {s.strip() for s in args.instances.split(",") if s.strip()} or None
    insts = load_directory(Path(args.instances_dir), wanted=wanted, verbose=args.verbose)
    widths = [int(x) for x in args.widths.split(",") if x.strip()]

    df = run_experiments(
        insts,
        widths=widths,
        timeout=args.timeout,
        width_policy=args.width_policy,
        log_progress=args.trace,
        log_dir=str(outdir),
    )
    df.to_csv(outdir / "raw.csv", index=False)

    summ = summarise_runs(df)
    summ.to_csv(outdir / "summary_by_instance.csv", index=False)

    overall = df.assign(is_exact=df["is_exact"].astype(float)).groupby("width").agg(
        elapsed_mean=("elapsed", "mean"),
        exact_share=("is_exact", "mean"),
    )
    overall.to_csv(outdir / "overall.csv")

    meta = {
        "args": vars(args),
        "n_instances": len(insts),
        "widths": widths,
    }
    with open(outdir / "meta.json", "w") as f:
        json.dump(meta, f, indent=2)


if __name__ == "__main__":
    main()
