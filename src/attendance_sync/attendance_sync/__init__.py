"""Attendance Sync package.

Offline-first attendance capture for the Elore HR mobile client: location
fixes, geofence verification, a durable offline queue and the sync engine
that drains it. Organized by feature modules (geo, location, geofence,
connectivity, offline, sync, ...) with Protocol ports and service layers
wired together in ``container.py``.
"""
