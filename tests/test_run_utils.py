"""
Tests for run-folder persistence used by the CLI.
"""

import json

import pandas as pd

from bibit.config import SweepConfig
from bibit.runner import sweep
from bibit.utils.run_utils import (
    create_run_folder,
    load_binary_csv,
    save_biclusters,
    save_config,
    save_statistics,
)


def test_create_run_folder(tmp_path):
    run_dir = create_run_folder(str(tmp_path))
    assert run_dir.is_dir()
    assert run_dir.name.startswith("run_")


def test_save_config(tmp_path):
    config = SweepConfig(bwl_range=range(2, 4), mnr_range=[2], show_progress=False)
    path = save_config(config, tmp_path)
    data = json.loads(path.read_text())
    assert data["bwl_range"] == [2, 3]
    assert data["mnc_range"] is None


def test_save_results(tmp_path, scenario_matrix):
    biclusters, stats = sweep(
        scenario_matrix, [4], [2], [2, 3], config=SweepConfig(show_progress=False)
    )

    csv_path = save_statistics(stats, tmp_path)
    frame = pd.read_csv(csv_path)
    assert frame["n_biclusters"].tolist() == [1, 0]

    json_path = save_biclusters(biclusters, stats, tmp_path)
    runs = json.loads(json_path.read_text())
    assert runs[0]["biclusters"] == [{"rows": [0, 1, 2], "cols": [0, 1], "pattern": "1100"}]
    assert runs[1]["biclusters"] == []


def test_load_binary_csv(tmp_path, scenario_matrix):
    path = tmp_path / "matrix.csv"
    pd.DataFrame(
        scenario_matrix,
        index=[f"s{i}" for i in range(4)],
        columns=list("abcd"),
    ).to_csv(path)

    frame = load_binary_csv(path)
    assert frame.shape == (4, 4)
    assert frame.to_numpy().tolist() == scenario_matrix.tolist()
