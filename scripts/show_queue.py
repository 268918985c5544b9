"""Print the offline attendance records still waiting for the server."""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.attendance_sync.attendance_sync.main import create_container


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--stale-hours",
        type=float,
        default=24.0,
        help="flag records queued for longer than this (default: 24)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    container = create_container()
    try:
        records = container.queue.load()
        if not records:
            print("Queue is empty")
            return

        stale = {r.id for r in container.sync_engine.stale_records(timedelta(hours=args.stale_hours))}
        for r in records:
            times = r.check_in_time.strftime("%H:%M:%S") if r.check_in_time else "-"
            if r.check_out_time:
                times += " -> " + r.check_out_time.strftime("%H:%M:%S")
            print(
                f"{'STALE ' if r.id in stale else ''}{r.id}  employee={r.employee_id}  "
                f"date={r.date.isoformat()}  {times}  "
                f"attempts={r.sync_attempts}  error={r.sync_error or '-'}"
            )
        print(f"{len(records)} record(s), {len(stale)} stale")
    finally:
        container.shutdown()


if __name__ == "__main__":
    main()
