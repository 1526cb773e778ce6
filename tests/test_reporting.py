import pandas as pd
import pytest

from srflp.reporting import layout_frame, summarise_runs, write_html_report
from srflp.solve import SolveResult


def test_layout_frame_coordinates(tiny_instance):
    frame = layout_frame(tiny_instance, [0, 1, 2])
    assert frame["department"].tolist() == [0, 1, 2]
    assert frame["start"].tolist() == [0, 1, 3]
    assert frame["end"].tolist() == [1, 3, 6]
    assert frame["center"].tolist() == [0.5, 2.0, 4.5]


def test_layout_frame_follows_order(tiny_instance):
    frame = layout_frame(tiny_instance, [2, 0, 1])
    assert frame["position"].tolist() == [0, 1, 2]
    assert frame["length"].tolist() == [3, 1, 2]
    assert frame["start"].tolist() == [0, 3, 4]


def test_html_report(tmp_path, tiny_instance):
    result = SolveResult(best_value=16, is_exact=True, solution=[1, 0, 2], elapsed=0.01)
    path = write_html_report(tiny_instance, result, tmp_path / "layout.html")
    text = path.read_text(encoding="utf-8")
    assert text.startswith("<!DOCTYPE html>")
    assert "<table" in text
    assert "1 0 2" in text
    assert "16" in text


def test_summarise_runs():
    df = pd.DataFrame(
        {
            "instance": ["a", "a", "b"],
            "width": [1, 1, 1],
            "best_value": [10, 12, None],
            "elapsed": [0.5, 1.5, 2.0],
            "is_exact": [True, False, False],
        }
    )
    summary = summarise_runs(df).set_index("instance")
    assert summary.loc["a", "best_value_mean"] == 11
    assert summary.loc["a", "best_value_min"] == 10
    assert summary.loc["a", "exact_share"] == 0.5
    assert summary.loc["b", "elapsed_mean"] == 2.0


def test_summarise_runs_requires_columns():
    with pytest.raises(ValueError, match="missing"):
        summarise_runs(pd.DataFrame({"instance": ["a"]}))
