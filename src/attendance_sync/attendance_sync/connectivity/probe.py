from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests

from ..core.constants import DEFAULT_PROBE_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class ConnectivityProbe(Protocol):
    def check(self) -> bool:
        raise NotImplementedError


class HttpConnectivityProbe(ConnectivityProbe):
    """Online when the API host answers at all (any HTTP status)."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self._url = url
        self._timeout = float(timeout)
        self._session = session or requests.Session()

    def check(self) -> bool:
        try:
            self._session.head(self._url, timeout=self._timeout, allow_redirects=False)
        except requests.RequestException as exc:
            logger.debug("Connectivity probe to %s failed: %s", self._url, exc)
            return False
        return True
