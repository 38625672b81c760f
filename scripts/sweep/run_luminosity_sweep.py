from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

import numpy as np

from daisyworld.analysis.regulation import luminosity_sweep, regulation_summary
from daisyworld.config import SimulationConfig, load_config
from daisyworld.logging_config import setup_logging
from daisyworld.presets import get_preset

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_OUTPUT_DIR = PROJECT_ROOT / "data" / "processed" / "sweeps"

logger = logging.getLogger("daisyworld.scripts.sweep")


def run_luminosity_sweep(
    *,
    output_dir: Path,
    start: float,
    stop: float,
    n_levels: int,
    settle_steps: int,
    config: SimulationConfig | None = None,
) -> Path:
    if n_levels < 2:
        msg = "n_levels must be at least 2"
        raise ValueError(msg)

    start_time = time.perf_counter()
    levels = np.linspace(start, stop, n_levels)
    sweep = luminosity_sweep(levels, settle_steps=settle_steps, config=config)
    summary = regulation_summary(sweep)

    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"luminosity_sweep_{start:.2f}_{stop:.2f}_{n_levels}.csv"
    sweep.to_csv(output_path, index=False)

    elapsed_s = time.perf_counter() - start_time
    logger.info("Swept %d luminosity levels in %.2fs", n_levels, elapsed_s)
    logger.info(
        "Regulated rise %.2fK vs unregulated %.2fK (ratio %.3f)",
        summary["regulated_rise_k"],
        summary["unregulated_rise_k"],
        summary["regulation_ratio"],
    )
    logger.info("Wrote sweep to: %s", output_path)
    return output_path


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sweep solar luminosity and compare Daisyworld to a bare planet."
    )
    parser.add_argument(
        "--output-dir",
        default=str(DEFAULT_OUTPUT_DIR),
        help="Directory where the CSV output is written.",
    )
    parser.add_argument("--start", type=float, default=1.0, help="First luminosity level.")
    parser.add_argument("--stop", type=float, default=1.8, help="Last luminosity level.")
    parser.add_argument(
        "--n-levels",
        type=int,
        default=5,
        help="Number of luminosity levels between start and stop.",
    )
    parser.add_argument(
        "--settle-steps",
        type=int,
        default=100,
        help="Steps to run at each luminosity level before sampling.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--config", default=None, help="Path to a JSON simulation config.")
    source.add_argument("--preset", default=None, help="Name of a built-in preset.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    config = None
    if args.config:
        config = load_config(args.config)
    elif args.preset:
        config = get_preset(args.preset).config

    run_luminosity_sweep(
        output_dir=Path(args.output_dir),
        start=args.start,
        stop=args.stop,
        n_levels=args.n_levels,
        settle_steps=args.settle_steps,
        config=config,
    )


if __name__ == "__main__":
    main()
