from __future__ import annotations

from typing import List, Protocol, Sequence

from ..geo.model import GeofenceSite


class SiteCacheRepository(Protocol):
    """Last known set of work sites, kept for offline checks."""

    def load_sites(self) -> List[GeofenceSite]:
        raise NotImplementedError

    def save_sites(self, sites: Sequence[GeofenceSite]) -> None:
        raise NotImplementedError

    def upsert_site(self, site: GeofenceSite) -> None:
        raise NotImplementedError
