from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..core.constants import DEFAULT_API_TIMEOUT_SECONDS
from ..core.exceptions import MalformedResponse, NetworkUnavailable, RequestFailed, ServerRejected

logger = logging.getLogger(__name__)


class ApiClient:
    """Thin JSON client over ``requests.Session``.

    Every transport or HTTP failure comes out as a ``RemoteError`` subclass.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        device_id: Optional[str] = None,
        app_version: Optional[str] = None,
        timeout: float = DEFAULT_API_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/") + "/api"
        self._timeout = float(timeout)
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"
        if device_id:
            self._session.headers["X-Device-Id"] = device_id
        if app_version:
            self._session.headers["X-App-Version"] = app_version

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def get(self, path: str, *, params: Optional[dict] = None, timeout: Optional[float] = None) -> Any:
        return self._request("GET", path, params=params, timeout=timeout)

    def post(self, path: str, payload: dict, *, timeout: Optional[float] = None) -> Any:
        return self._request("POST", path, json=payload, timeout=timeout)

    def _request(self, method: str, path: str, *, timeout: Optional[float] = None, **kwargs) -> Any:
        url = self.url_for(path)
        timeout = self._timeout if timeout is None else float(timeout)
        logger.debug("[API Request] %s %s", method, url)

        try:
            response = self._session.request(method, url, timeout=timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("[API Error] %s %s: %s", method, url, exc)
            raise NetworkUnavailable(str(exc)) from exc

        logger.debug("[API Response] %s %s", response.status_code, url)

        if 400 <= response.status_code < 500:
            raise ServerRejected(response.status_code, _error_detail(response))
        if not 200 <= response.status_code < 300:
            raise RequestFailed(response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse(f"{method} {url}: body is not JSON") from exc

    def close(self) -> None:
        self._session.close()


def _error_detail(response: requests.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or None
    if isinstance(body, dict):
        return body.get("detail") or body.get("message") or body.get("error") or body
    return body
