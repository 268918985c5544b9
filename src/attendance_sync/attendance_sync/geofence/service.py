from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Optional, Protocol, Sequence

from ..api.schemas import GeofenceVerificationResponse
from ..core.constants import DEFAULT_GEOFENCE_TIMEOUT_SECONDS
from ..core.enums import VerdictSource
from ..core.exceptions import RemoteError
from ..geo.distance import haversine_distance_meters, nearest_site
from ..geo.model import GeofenceSite, GeofenceVerdict, PositionFix
from .repository import SiteCacheRepository

logger = logging.getLogger(__name__)


class GeofenceRemote(Protocol):
    def verify_geofence(self, fix: PositionFix, *, timeout: Optional[float] = None) -> GeofenceVerificationResponse:
        raise NotImplementedError

    def fetch_branch_geofence(self, branch_id: str) -> GeofenceSite:
        raise NotImplementedError


class OnlineStatus(Protocol):
    @property
    def is_online(self) -> bool:
        raise NotImplementedError


class GeofenceVerifier:
    """Decide whether a fix is inside a work site.

    Online the server decides, within ``timeout_seconds`` of wall-clock time. Offline, or when the server call fails, the
    cached sites decide. With no sites at all the verdict is
    ``assume_within_on_failure`` (True by default: attendance capture is never
    blocked, the server reviews the record at sync time).
    """

    def __init__(
        self,
        remote: GeofenceRemote,
        cache: SiteCacheRepository,
        connectivity: OnlineStatus,
        *,
        timeout_seconds: float = DEFAULT_GEOFENCE_TIMEOUT_SECONDS,
        assume_within_on_failure: bool = True,
    ):
        self._remote = remote
        self._cache = cache
        self._connectivity = connectivity
        self._timeout = float(timeout_seconds)
        self._assume_within = bool(assume_within_on_failure)
        # Calls past the deadline are abandoned, not joined.
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="geofence-verify")

    @property
    def assume_within_on_failure(self) -> bool:
        return self._assume_within

    def verify(self, fix: PositionFix, candidate_sites: Optional[Sequence[GeofenceSite]] = None) -> GeofenceVerdict:
        if self._connectivity.is_online:
            future = self._executor.submit(self._remote.verify_geofence, fix, timeout=self._timeout)
            try:
                response = future.result(timeout=self._timeout)
            except FutureTimeout:
                future.cancel()
                logger.warning("Online geofence check exceeded %.1fs, using cached sites", self._timeout)
            except RemoteError as exc:
                logger.warning("Online geofence check failed, using cached sites: %s", exc)
            else:
                return self._server_verdict(fix, response)

        return self.verify_offline(fix, candidate_sites)

    def verify_offline(self, fix: PositionFix, candidate_sites: Optional[Sequence[GeofenceSite]] = None) -> GeofenceVerdict:
        sites = list(candidate_sites) if candidate_sites else self._cache.load_sites()
        if not sites:
            logger.info("No geofence sites cached, fallback verdict within=%s", self._assume_within)
            return GeofenceVerdict(within_bounds=self._assume_within, source=VerdictSource.FALLBACK)

        point = fix.coordinates
        for site in sites:
            distance = haversine_distance_meters(point, site.center)
            if distance <= site.radius_meters:
                return GeofenceVerdict(
                    within_bounds=True,
                    source=VerdictSource.CACHE,
                    distance_meters=distance,
                    site=site,
                )

        site, distance = nearest_site(point, sites)
        return GeofenceVerdict(
            within_bounds=False,
            source=VerdictSource.CACHE,
            distance_meters=distance,
            site=site,
        )

    def refresh_site(self, branch_id: str) -> GeofenceSite:
        """Pull one branch geofence from the server into the cache."""
        site = self._remote.fetch_branch_geofence(branch_id)
        self._cache.upsert_site(site)
        return site

    def _server_verdict(self, fix: PositionFix, response: GeofenceVerificationResponse) -> GeofenceVerdict:
        site = response.site.to_site() if response.site else None
        self._refresh_cache(response, site)

        distance = response.distance
        if distance is None and site is not None:
            distance = haversine_distance_meters(fix.coordinates, site.center)

        return GeofenceVerdict(
            within_bounds=response.is_within_geofence,
            source=VerdictSource.SERVER,
            distance_meters=distance,
            site=site,
        )

    def _refresh_cache(self, response: GeofenceVerificationResponse, site: Optional[GeofenceSite]) -> None:
        try:
            if response.sites is not None:
                self._cache.save_sites([s.to_site() for s in response.sites])
            elif site is not None:
                self._cache.upsert_site(site)
        except Exception:
            # Opportunistic refresh; the server verdict stands regardless.
            logger.exception("Could not refresh geofence site cache")

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
