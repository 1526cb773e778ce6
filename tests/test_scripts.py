import importlib.util
from pathlib import Path

import pandas as pd

SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"


def _load(name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_compare_widths(tmp_path):
    raw = tmp_path / "raw.csv"
    pd.DataFrame(
        {
            "instance": ["a", "a", "b", "b"],
            "width": [1, 10, 1, 10],
            "best_value": [120, 100, 50, 50],
        }
    ).to_csv(raw, index=False)
    comp = _load("compare_widths").compare(str(raw)).set_index("instance")
    assert comp.loc["a", "w1"] == 120
    assert comp.loc["a", "diff_w10_minus_w1"] == -20
    assert comp.loc["b", "diff_w10_minus_w1"] == 0
