from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np

from bibit.config import SweepConfig
from bibit.runner import estimate_cost, sweep
from bibit.utils.logging_utils import LOGGER, add_file_handler, print_banner, timed_section
from bibit.utils.matrix_generator import planted_bicluster_matrix
from bibit.utils.run_utils import (
    create_run_folder,
    get_log_file_path,
    load_binary_csv,
    save_biclusters,
    save_config,
    save_statistics,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Bibit: bitword-encoded biclustering of binary matrices with a parameter sweep."
    )

    # --- Input ---
    parser.add_argument("--input", type=Path, default=None,
                        help="CSV of a samples x features 0/1 matrix. Omit for a synthetic matrix.")
    parser.add_argument("--no-header", action="store_true", help="Input CSV has no header row.")
    parser.add_argument("--no-index", action="store_true", help="Input CSV has no row-label column.")

    # --- Synthetic Matrix Params ---
    parser.add_argument("--rows", type=int, default=60, help="Synthetic matrix rows.")
    parser.add_argument("--cols", type=int, default=40, help="Synthetic matrix columns.")
    parser.add_argument("--density", type=float, default=0.05, help="Background density in (0, 1].")
    parser.add_argument("--planted", type=int, default=3, help="Number of planted biclusters.")
    parser.add_argument("--random-seed", type=int, default=42)

    # --- Sweep Ranges (inclusive; unset = defaults) ---
    parser.add_argument("--bwl-min", type=int, default=None)
    parser.add_argument("--bwl-max", type=int, default=None)
    parser.add_argument("--mnr-min", type=int, default=2)
    parser.add_argument("--mnr-max", type=int, default=10)
    parser.add_argument("--mnc-min", type=int, default=2)
    parser.add_argument("--mnc-max", type=int, default=10)

    # --- Execution ---
    parser.add_argument("--max-workers", type=int, default=None)
    parser.add_argument("--search-workers", type=int, default=1)
    parser.add_argument("--run-timeout", type=float, default=None, help="Seconds per run.")
    parser.add_argument("--no-progress", action="store_true")
    parser.add_argument("--runs-dir", type=str, default="runs")

    return parser.parse_args()


def build_config(args: argparse.Namespace) -> SweepConfig:
    bwl_range = None
    if args.bwl_min is not None or args.bwl_max is not None:
        bwl_min = args.bwl_min if args.bwl_min is not None else 2
        bwl_max = args.bwl_max if args.bwl_max is not None else bwl_min
        bwl_range = list(range(bwl_min, bwl_max + 1))

    return SweepConfig(
        bwl_range=bwl_range,
        mnr_range=list(range(args.mnr_min, args.mnr_max + 1)),
        mnc_range=list(range(args.mnc_min, args.mnc_max + 1)),
        max_workers=args.max_workers,
        search_workers=args.search_workers,
        run_timeout=args.run_timeout,
        show_progress=not args.no_progress,
    )


def load_matrix(args: argparse.Namespace):
    if args.input is not None:
        LOGGER.info(f"Loading binary matrix from [cyan]{args.input}[/cyan]")
        return load_binary_csv(args.input, header=not args.no_header, index_col=not args.no_index)

    matrix, blocks = planted_bicluster_matrix(
        n_rows=args.rows,
        n_cols=args.cols,
        n_biclusters=args.planted,
        density=args.density,
        seed=args.random_seed,
    )
    LOGGER.info(
        f"Synthetic {args.rows}x{args.cols} matrix, density={np.mean(matrix):.3f}, "
        f"{len(blocks)} planted biclusters"
    )
    return matrix


def main() -> None:
    args = parse_args()
    config = build_config(args)

    # Prepare Run Environment
    run_dir = create_run_folder(args.runs_dir)
    add_file_handler(get_log_file_path(run_dir))
    save_config(config, run_dir)

    print_banner("BIBIT PARAMETER SWEEP")
    matrix = load_matrix(args)

    cost = estimate_cost(matrix, config.bwl_range, config.mnr_range, config.mnc_range)
    LOGGER.info(
        f"Estimated cost: {cost.n_runs} runs x {cost.n_pairs} row pairs "
        f"(~{cost.word_ops:,} word operations)"
    )

    with timed_section("Parameter Sweep"):
        biclusters, stats = sweep(matrix, config=config)

    with timed_section("Saving Results"):
        csv_path = save_statistics(stats, run_dir)
        json_path = save_biclusters(biclusters, stats, run_dir)
        LOGGER.info(f"Statistics: [cyan]{csv_path}[/cyan], biclusters: [cyan]{json_path}[/cyan]")

    print_banner("Sweep Successful - Data Saved")


if __name__ == "__main__":
    main()
