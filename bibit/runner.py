from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import itertools
import math

import time

from rich.progress import Progress, BarColumn, TimeElapsedColumn

from .config import SweepConfig
from .errors import SearchCancelled
from .algorithms.encoder import _encode_validated
from .algorithms.search import Bicluster, search
from .utils.cancellation import CancellationToken
from .utils.stats import RunParameters, RunStatistics, covered_cols, covered_rows
from .utils.validation import (
    MAX_BWL,
    BinaryMatrix,
    validate_binary_matrix,
    validate_bwl,
    validate_range,
)
from .utils.logging_utils import LOGGER

DEFAULT_MIN_SIZE = 2
DEFAULT_MAX_SIZE = 10


@dataclass
class SweepCost:
    """
    Up-front size of a sweep, so callers can bound configurations before launch.
    """

    n_rows: int
    n_cols: int
    n_pairs: int        # Row pairs per run, I*(I-1)/2
    n_runs: int
    total_pairs: int    # n_pairs * n_runs
    word_ops: int       # Word ANDs for pattern derivation over all runs


# ------------------------------------------------------------
# Parameter ranges
# ------------------------------------------------------------
def default_ranges(n_cols: int) -> Tuple[List[int], List[int], List[int]]:
    """
    Default sweep ranges: bwl 2..ceil(log2 J) (at least [2]), mnr and mnc 2..10.
    """
    bwl_max = max(DEFAULT_MIN_SIZE, math.ceil(math.log2(max(n_cols, 1))))
    bwl_max = min(bwl_max, MAX_BWL)
    size_range = list(range(DEFAULT_MIN_SIZE, DEFAULT_MAX_SIZE + 1))
    return list(range(DEFAULT_MIN_SIZE, bwl_max + 1)), size_range, list(size_range)


def parameter_grid(
    bwl_range: Sequence[int],
    mnr_range: Sequence[int],
    mnc_range: Sequence[int],
) -> List[RunParameters]:
    """Cross product in run order: bwl outermost, then mnr, then mnc."""
    return [
        RunParameters(bwl, mnr, mnc)
        for bwl, mnr, mnc in itertools.product(bwl_range, mnr_range, mnc_range)
    ]


def _resolve_ranges(
    n_cols: int,
    bwl_range: Optional[Sequence[int]],
    mnr_range: Optional[Sequence[int]],
    mnc_range: Optional[Sequence[int]],
) -> Tuple[List[int], List[int], List[int]]:
    default_bwl, default_mnr, default_mnc = default_ranges(n_cols)

    bwls = validate_range(default_bwl if bwl_range is None else bwl_range, "bwl_range")
    mnrs = validate_range(default_mnr if mnr_range is None else mnr_range, "mnr_range")
    mncs = validate_range(default_mnc if mnc_range is None else mnc_range, "mnc_range")

    for bwl in bwls:
        validate_bwl(bwl)

    return bwls, mnrs, mncs


def estimate_cost(
    matrix,
    bwl_range: Optional[Sequence[int]] = None,
    mnr_range: Optional[Sequence[int]] = None,
    mnc_range: Optional[Sequence[int]] = None,
) -> SweepCost:
    """
    Estimate the work of a sweep without running it.

    Raises:
        InvalidInputError: invalid matrix or ranges.
    """
    x = validate_binary_matrix(matrix)
    n_rows, n_cols = x.shape
    grid = parameter_grid(*_resolve_ranges(n_cols, bwl_range, mnr_range, mnc_range))

    n_pairs = n_rows * (n_rows - 1) // 2
    word_ops = sum(n_pairs * -(-n_cols // p.bwl) for p in grid)

    return SweepCost(
        n_rows=n_rows,
        n_cols=n_cols,
        n_pairs=n_pairs,
        n_runs=len(grid),
        total_pairs=n_pairs * len(grid),
        word_ops=word_ops,
    )


# ------------------------------------------------------------
# Worker for one (bwl, mnr, mnc) cell
# ------------------------------------------------------------
def run_single(
    matrix: BinaryMatrix,
    params: RunParameters,
    run_index: int = 0,
    token: Optional[CancellationToken] = None,
    search_workers: int = 1,
) -> Tuple[List[Bicluster], RunStatistics]:
    """
    Encode `matrix` at params.bwl and search it with params.mnr / params.mnc.

    A cancelled search returns no biclusters and status "cancelled".

    Raises:
        InvalidInputError: invalid matrix or bwl; checked before timing starts.
    """
    x = validate_binary_matrix(matrix)
    validate_bwl(params.bwl)
    return _run_validated(x, params, run_index, token, search_workers)


def _run_validated(
    x: BinaryMatrix,
    params: RunParameters,
    run_index: int,
    token: Optional[CancellationToken],
    search_workers: int,
) -> Tuple[List[Bicluster], RunStatistics]:
    stats = RunStatistics(run_index=run_index, bwl=params.bwl, mnr=params.mnr, mnc=params.mnc)

    # encode_time covers packing only; validation happened before
    t0 = time.perf_counter()
    xenc = _encode_validated(x, params.bwl)
    t1 = time.perf_counter()
    stats.encode_time = t1 - t0

    try:
        biclusters = search(xenc, params.mnr, params.mnc, token=token, max_workers=search_workers)
    except SearchCancelled:
        stats.status = "cancelled"
        biclusters = []
    t2 = time.perf_counter()

    stats.search_time = t2 - t1
    stats.total_time = t2 - t0
    stats.n_biclusters = len(biclusters)
    stats.n_rows_covered = len(covered_rows(biclusters))
    stats.n_cols_covered = len(covered_cols(biclusters))

    return biclusters, stats


def _compute_for_run(
    index: int,
    matrix: BinaryMatrix,
    params: RunParameters,
    config: SweepConfig,
    cancel_token: Optional[CancellationToken],
) -> Tuple[List[Bicluster], RunStatistics]:
    # Timeout counts from the start of the run, not from submission
    token = CancellationToken(timeout=config.run_timeout, parent=cancel_token)
    return _run_validated(matrix, params, index, token, config.search_workers)


# ------------------------------------------------------------
# Parallel sweep with progress bar + logging
# ------------------------------------------------------------
def sweep(
    matrix,
    bwl_range: Optional[Sequence[int]] = None,
    mnr_range: Optional[Sequence[int]] = None,
    mnc_range: Optional[Sequence[int]] = None,
    config: Optional[SweepConfig] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> Tuple[List[List[Bicluster]], List[RunStatistics]]:
    """
    Run the Bibit search over the cross product of the three ranges.

    Explicit ranges override those in `config`; ranges left unset everywhere
    fall back to default_ranges(). Runs execute on a thread pool of
    config.max_workers and are reported in run order (bwl, mnr, mnc).

    Returns:
        (biclusters per run, statistics per run), aligned by run index.
        When config.keep_biclusters is False every bicluster list is empty.

    Raises:
        InvalidInputError: invalid matrix or ranges; nothing is run.
    """
    config = config or SweepConfig()
    x = validate_binary_matrix(matrix)

    bwls, mnrs, mncs = _resolve_ranges(
        x.shape[1],
        bwl_range if bwl_range is not None else config.bwl_range,
        mnr_range if mnr_range is not None else config.mnr_range,
        mnc_range if mnc_range is not None else config.mnc_range,
    )
    grid = parameter_grid(bwls, mnrs, mncs)
    cost = estimate_cost(x, bwls, mnrs, mncs)

    LOGGER.info(
        f"[bold yellow]Starting Sweep[/bold yellow] | "
        f"I={cost.n_rows}, J={cost.n_cols}, pairs/run={cost.n_pairs}, "
        f"runs={cost.n_runs}, bwl={bwls}, mnr={mnrs}, mnc={mncs}"
    )

    biclusters: List[List[Bicluster]] = [[] for _ in grid]
    results: List[RunStatistics] = []

    progress = Progress(
        "[progress.description]{task.description}",
        BarColumn(),
        "[progress.percentage]{task.percentage:>3.0f}%",
        TimeElapsedColumn(),
        disable=not config.show_progress,
    )

    with progress:
        task = progress.add_task(f"Sweeping {len(grid)} runs...", total=len(grid))

        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            futures = {
                executor.submit(_compute_for_run, idx, x, params, config, cancel_token): (idx, params)
                for idx, params in enumerate(grid)
            }

            for future in as_completed(futures):
                idx, params = futures[future]
                try:
                    run_biclusters, stats = future.result()
                    if config.keep_biclusters:
                        biclusters[idx] = run_biclusters
                    LOGGER.debug(
                        f"run {idx} bwl={params.bwl} mnr={params.mnr} mnc={params.mnc}: "
                        f"{stats.n_biclusters} biclusters ({stats.status}) in {stats.total_time:.3f}s"
                    )
                except Exception as e:
                    LOGGER.error(f"[red]Run {idx} ({params}) failed:[/red] {e}")
                    stats = RunStatistics(
                        run_index=idx,
                        bwl=params.bwl,
                        mnr=params.mnr,
                        mnc=params.mnc,
                        status="failed",
                        error=str(e),
                    )
                results.append(stats)

                progress.update(task, advance=1)

    results.sort(key=lambda s: s.run_index)

    n_cancelled = sum(s.status == "cancelled" for s in results)
    n_failed = sum(s.status == "failed" for s in results)
    LOGGER.info(
        f"[bold green]Sweep completed.[/bold green] "
        f"{sum(s.n_biclusters for s in results)} biclusters over {len(results)} runs "
        f"({n_cancelled} cancelled, {n_failed} failed)"
    )
    return biclusters, results
