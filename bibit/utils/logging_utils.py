from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from time import perf_counter
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


console = Console()

LOGGER_NAME = "bibit"


def init_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Initialize the package logger with a Rich console handler.

    File output is attached separately per run folder via add_file_handler().
    Calling this more than once never stacks handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Avoid attaching multiple handlers
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return logger

    rich_handler = RichHandler(
        console=console,
        markup=True,
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
        show_path=False,
    )
    logger.addHandler(rich_handler)

    logger.propagate = False  # prevent double logs

    return logger


def add_file_handler(log_file: Path, level: int = logging.INFO) -> logging.FileHandler:
    """
    Mirror LOGGER into a plain-text log file (e.g. runs/run_.../log.txt).
    """
    os.makedirs(Path(log_file).parent, exist_ok=True)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    LOGGER.addHandler(file_handler)

    console.print(
        f"[green]Logging initialized.[/green] "
        f"Log file: [cyan]{log_file}[/cyan]"
    )
    return file_handler


# Global shared logger instance
LOGGER = init_logger()


# ------------------------------------------------------------
# Utility: Pretty banners (SECTION HEADERS)
# ------------------------------------------------------------
def print_banner(text: str) -> None:
    """
    Print a banner in the console to mark sweep phases.
    """
    console.rule(f"[bold cyan]{text}[/bold cyan]")


# ------------------------------------------------------------
# Utility: timed section
# ------------------------------------------------------------
@contextmanager
def timed_section(name: str):
    """
    Measure execution time of a code section and log it.
    Usage:
        with timed_section("Parameter sweep"):
            sweep(matrix)
    """
    LOGGER.info(f"[bold green]Starting:[/bold green] {name}")
    start = perf_counter()
    yield
    elapsed = perf_counter() - start
    LOGGER.info(
        f"[bold green]Finished:[/bold green] {name} "
        f"in [cyan]{elapsed:.3f}[/cyan] seconds"
    )
