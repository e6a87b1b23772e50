from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import FrozenSet, Iterable, List, Optional

import pandas as pd


@dataclass(frozen=True)
class RunParameters:
    """One cell of the sweep: bitword width, minimum rows, minimum columns."""

    bwl: int
    mnr: int
    mnc: int


@dataclass
class RunStatistics:
    """
    Per-run statistics of a Bibit sweep.

    Runs that produce no biclusters keep the zero defaults. `status` is
    "ok", "cancelled" or "failed"; `error` holds the failure message.
    """

    run_index: int
    bwl: int
    mnr: int
    mnc: int

    n_biclusters: int = 0
    n_rows_covered: int = 0
    n_cols_covered: int = 0

    # Seconds
    encode_time: float = 0.0
    search_time: float = 0.0
    total_time: float = 0.0

    status: str = "ok"
    error: Optional[str] = None

    @property
    def params(self) -> RunParameters:
        return RunParameters(self.bwl, self.mnr, self.mnc)


def covered_rows(biclusters: Iterable) -> FrozenSet[int]:
    """Union of the row sets of all biclusters."""
    return frozenset().union(*(b.rows for b in biclusters))


def covered_cols(biclusters: Iterable) -> FrozenSet[int]:
    """Union of the column sets of all biclusters."""
    return frozenset().union(*(b.cols for b in biclusters))


def stats_to_frame(stats: List[RunStatistics]) -> pd.DataFrame:
    """One row per run, columns in RunStatistics field order."""
    columns = [f.name for f in fields(RunStatistics)]
    return pd.DataFrame([asdict(s) for s in stats], columns=columns)
