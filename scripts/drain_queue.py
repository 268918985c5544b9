"""Run one sync pass over the offline queue and print the report."""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.attendance_sync.attendance_sync.main import create_container


def main() -> int:
    container = create_container()
    try:
        container.queue.load()
        if not container.connectivity.poll():
            print("Offline: API not reachable, nothing sent")
            return 1

        report = container.sync_engine.drain()
        if report.skipped:
            print(f"Skipped: {report.reason}")
            return 0

        for record_id in report.succeeded:
            print(f"OK    {record_id}")
        for failure in report.failed:
            print(f"FAIL  {failure.id}: {failure.error}")
        return 1 if report.failed else 0
    finally:
        container.shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
