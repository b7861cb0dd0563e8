# diagnose_skipped_rows.py
import argparse

import pandas as pd

from config import settings
from src.collisions.dataset import load_raw_collisions
from src.collisions.pipeline import CollisionPipeline


def check_skipped(csv_path):
    print("=== [Rows dropped during loading and cleaning] ===")

    try:
        loaded = load_raw_collisions(csv_path)
    except (FileNotFoundError, KeyError) as e:
        print(f"[Error] {e}")
        return

    result = CollisionPipeline.default().run(loaded.records, skipped=loaded.skipped)
    if not result.skipped:
        print("[*] No rows were skipped.")
        return

    df = pd.DataFrame(
        [
            {
                "stage": s.stage,
                "row": s.row_number,
                "collision_id": s.collision_id,
                "reason": s.reason,
            }
            for s in result.skipped
        ]
    )
    print(df.groupby("stage").size().to_string())
    print()
    print(df.head(50).to_string(index=False))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="List rows skipped by the cleaning pipeline.")
    parser.add_argument("csv_path", nargs="?", default=settings.CRASHES_CSV)
    check_skipped(parser.parse_args().csv_path)
