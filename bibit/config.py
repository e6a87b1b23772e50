from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass
class SweepConfig:
    """
    Configuration for a Bibit parameter sweep.

    Ranges left as None are resolved from the matrix shape by
    runner.default_ranges (bwl 2..ceil(log2 J), mnr/mnc 2..10).
    """

    bwl_range: Optional[Sequence[int]] = None   # Bitword widths to sweep
    mnr_range: Optional[Sequence[int]] = None   # Minimum rows per bicluster
    mnc_range: Optional[Sequence[int]] = None   # Minimum columns per bicluster
    max_workers: Optional[int] = None           # Threads for the sweep pool
    search_workers: int = 1                     # Threads inside one search call
    run_timeout: Optional[float] = None         # Seconds per run (None = unbounded)
    show_progress: bool = True                  # Rich progress bar
    keep_biclusters: bool = True                # False keeps statistics only
