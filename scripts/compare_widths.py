# compare_widths.py
from __future__ import annotations
import pandas as pd

def compare(raw_csv_path: str) -> pd.DataFrame:
    df = pd.read_csv(raw_csv_path)
    # pivot to see mean best value per instance x width
    pt = df.pivot_table(index="instance", columns="width", values="best_value", aggfunc="mean")
    widths = sorted(pt.columns)
    if len(widths) >= 2:
        pt[f"diff_w{widths[-1]}_minus_w{widths[0]}"] = pt[widths[-1]] - pt[widths[0]]
    pt.columns = [c if isinstance(c, str) else f"w{c}" for c in pt.columns]
    return pt.reset_index()

if __name__ == "__main__":
    import argparse
    ap = argparse.ArgumentParser()
    ap.add_argument("--raw", required=True)
    ap.add_argument("--out", default="comparison.csv")
    args = ap.parse_args()
    comp = compare(args.raw)
    comp.to_csv(args.out, index=False)
    print("Saved", args.out)
