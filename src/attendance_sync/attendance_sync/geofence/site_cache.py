from __future__ import annotations

import json
import logging
from typing import List, Sequence

from ..core.constants import SITES_STORAGE_KEY
from ..core.exceptions import ValidationError
from ..geo.model import GeofenceSite
from ..storage.repository import KeyValueStorage
from .repository import SiteCacheRepository

logger = logging.getLogger(__name__)


class KeyValueSiteCache(SiteCacheRepository):
    def __init__(self, storage: KeyValueStorage, *, storage_key: str = SITES_STORAGE_KEY):
        self._storage = storage
        self._key = storage_key

    def load_sites(self) -> List[GeofenceSite]:
        raw = self._storage.get_item(self._key)
        if not raw:
            return []
        try:
            return [GeofenceSite.from_dict(item) for item in json.loads(raw)]
        except (ValueError, KeyError, TypeError, ValidationError):
            # Treated as empty until the next server response refills it.
            logger.warning("Discarding unreadable geofence site cache", exc_info=True)
            return []

    def save_sites(self, sites: Sequence[GeofenceSite]) -> None:
        self._storage.set_item(self._key, json.dumps([s.to_dict() for s in sites]))
        logger.debug("Cached %d geofence site(s)", len(sites))

    def upsert_site(self, site: GeofenceSite) -> None:
        sites = [s for s in self.load_sites() if s.id != site.id]
        sites.append(site)
        self.save_sites(sites)
