"""Example: drive the services directly (no UI).

Shows the offline path: connectivity drops, a check-in is queued, and the
reconnect drains the queue.
"""

from src.attendance_sync.attendance_sync.geo.model import GeofenceSite, PositionFix
from src.attendance_sync.attendance_sync.location.provider import ManualLocationProvider
from src.attendance_sync.attendance_sync.main import create_container


def main():
    provider = ManualLocationProvider(fix=PositionFix(-1.28638, 36.81723, accuracy_meters=15.0))
    with create_container(location_provider=provider) as container:
        container.site_cache.save_sites(
            [GeofenceSite(id="nbo-hq", name="Nairobi HQ", latitude=-1.28650, longitude=36.81720, radius_meters=100)]
        )

        container.connectivity.set_online(False)
        result = container.attendance_service.check_in("EMP-001")
        print(result.verdict, "queued" if result.queued else "synced")
        print([r.to_dict() for r in container.queue.list_pending()])

        # The reconnect triggers one drain pass.
        container.connectivity.set_online(True)
        print([r.to_dict() for r in container.queue.list_pending()])


if __name__ == "__main__":
    main()
