from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import List

import pandas as pd

from .stats import RunStatistics, stats_to_frame


def create_run_folder(base_dir: str = "runs") -> Path:
    """
    Create a new timestamped run folder:
        runs/run_YYYYMMDD_HHMMSS/

    Returns:
        Path object of the new directory.
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = Path(base_dir) / f"run_{timestamp}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def save_config(config, run_dir: Path) -> Path:
    """
    Save the SweepConfig as a JSON file inside the run directory.
    """
    config_dict = {
        key: list(value) if isinstance(value, range) else value
        for key, value in asdict(config).items()
    }
    config_path = run_dir / "config.json"
    with config_path.open("w", encoding="utf-8") as f:
        json.dump(config_dict, f, indent=4)
    return config_path


def get_log_file_path(run_dir: Path) -> Path:
    """
    Return the path where the log file should be stored.
    """
    return run_dir / "log.txt"


def load_binary_csv(path: Path, header: bool = True, index_col: bool = True) -> pd.DataFrame:
    """
    Read a samples x features 0/1 matrix from CSV.

    Values are not checked here; the sweep validates them before running.
    """
    return pd.read_csv(
        path,
        header=0 if header else None,
        index_col=0 if index_col else None,
    )


def save_statistics(stats: List[RunStatistics], run_dir: Path) -> Path:
    """
    Write one CSV row per run.
    """
    csv_path = run_dir / "run_statistics.csv"
    stats_to_frame(stats).to_csv(csv_path, index=False)
    return csv_path


def save_biclusters(biclusters: List[list], stats: List[RunStatistics], run_dir: Path) -> Path:
    """
    Write every run's biclusters as JSON, keyed by run parameters.
    """
    runs = []
    for run_stats, run_biclusters in zip(stats, biclusters):
        runs.append({
            "run_index": run_stats.run_index,
            "bwl": run_stats.bwl,
            "mnr": run_stats.mnr,
            "mnc": run_stats.mnc,
            "biclusters": [
                {
                    "rows": sorted(b.rows),
                    "cols": sorted(b.cols),
                    "pattern": b.pattern_string(),
                }
                for b in run_biclusters
            ],
        })

    json_path = run_dir / "biclusters.json"
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(runs, f, indent=2)
    return json_path
