"""Record a check-in (or check-out) at the given coordinates.

Example:
    python scripts/check_in.py EMP-001 --lat -1.2921 --lng 36.8219 --accuracy 12
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.attendance_sync.attendance_sync.core.exceptions import DomainError
from src.attendance_sync.attendance_sync.geo.model import PositionFix
from src.attendance_sync.attendance_sync.location.provider import ManualLocationProvider
from src.attendance_sync.attendance_sync.main import create_container


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("employee_id")
    parser.add_argument("--lat", type=float, required=True)
    parser.add_argument("--lng", type=float, required=True)
    parser.add_argument("--accuracy", type=float, default=None)
    parser.add_argument("--check-out", action="store_true", help="record a check-out instead")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        provider = ManualLocationProvider(fix=PositionFix(args.lat, args.lng, args.accuracy))
        container = create_container(location_provider=provider)
    except DomainError as exc:
        print(f"Invalid input: {exc}")
        return 2

    try:
        container.start()
        container.connectivity.poll()
        service = container.attendance_service
        action = service.check_out if args.check_out else service.check_in
        result = action(args.employee_id)
    except DomainError as exc:
        print(f"Failed: {exc}")
        return 1
    finally:
        container.shutdown()

    verdict = result.verdict
    print(
        f"{result.punch_type.value} {'synced' if result.synced else 'queued'} "
        f"(record {result.record.id}); geofence within={verdict.within_bounds} "
        f"source={verdict.source.value} distance={verdict.distance_meters}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
