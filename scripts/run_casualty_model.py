"""
Casualty Model Script.

Loads a sample of NYC motor-vehicle-collision reports, runs the cleaning
pipeline, fits the three nested logit models and prints the likelihood-ratio
comparison plus the odds-ratio table of the selected model.

Usage:
    python scripts/run_casualty_model.py <path_to_collisions.csv>
"""

import argparse
import os
import sys

import pandas as pd
from loguru import logger

from config import settings
from src.collisions.dataset import load_raw_collisions, records_to_frame
from src.collisions.modeling import ModelFitError, compare_models
from src.collisions.pipeline import CollisionPipeline
from src.collisions.summary import casualty_rate_by, severity_breakdown


def configure_logging():
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)
    logger.add(
        os.path.join(settings.LOG_DIR, "casualty_model_{time}.log"),
        level="DEBUG",
        rotation="10 MB",
    )


def main():
    # 1. Set up argument parser
    parser = argparse.ArgumentParser(description="Fit the NYC collision casualty models.")
    parser.add_argument(
        "csv_path",
        type=str,
        nargs="?",
        default=settings.CRASHES_CSV,
        help="Path to the collision CSV extract.",
    )
    args = parser.parse_args()

    configure_logging()

    # 2. Load and clean
    print(f"[*] Loading collisions from '{args.csv_path}'...")
    try:
        loaded = load_raw_collisions(args.csv_path, progress=True)
    except (FileNotFoundError, KeyError) as e:
        print(f"[Error] {e}")
        return 1

    result = CollisionPipeline.default().run(loaded.records, skipped=loaded.skipped)
    frame = records_to_frame(result.records)
    print(f"[*] {len(frame)} model-ready collisions, {len(result.skipped)} rows skipped.")

    if frame.empty:
        print("[!] Nothing left to model after cleaning.")
        return 1

    print("\n=== Severity ===")
    print(severity_breakdown(frame).to_string(index=False))
    print("\n=== Casualty rate by time of day ===")
    print(casualty_rate_by(frame, "time_of_day").to_string(index=False))

    # 3. Fit and compare
    try:
        comparison = compare_models(frame)
    except ModelFitError as e:
        print(f"[Error] Model comparison failed for {e.spec_name}: {e.reason}")
        return 1

    print("\n=== Likelihood-ratio tests ===")
    for t in comparison.tests:
        print(
            f"  - {t.restricted} -> {t.full}: chi2={t.statistic:.3f}, df={t.df}, "
            f"p={t.p_value:.4g} {'(significant)' if t.significant else ''}"
        )

    selected = comparison.selected_model
    print(f"\n=== Selected: {selected.name} ===")
    print(f"  {selected.formula}")
    with pd.option_context("display.float_format", "{:.4f}".format):
        print(selected.odds_ratio_table().to_string(index=False))

    print("\n[Done] Casualty model comparison completed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
