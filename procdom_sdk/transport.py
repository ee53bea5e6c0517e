"""
Synchronous HTTP transport for the metrics service.

Calls are blocking and, unless a timeout is configured, wait indefinitely.
There is no retry: a transport failure is reported to the caller at once.
"""

import logging
from typing import Any, Dict, Optional

import requests

from .exceptions import TransportError, error_from_payload

logger = logging.getLogger(__name__)


class Transport:
    """Thin wrapper around a ``requests.Session`` speaking the service's JSON API."""

    def __init__(self, base_url: str, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Issue a request and decode the JSON response.

        Returns:
            The decoded body, or None for empty (204) responses.

        Raises:
            TransportError: connection failure or undecodable body
            MetricsServiceError: (or a subclass) for error responses
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url} params={params}")
        try:
            response = self._session.request(method, url, json=json, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            if response.status_code >= 400:
                raise error_from_payload(None, response.status_code)
            return None

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(
                f"{method} {path} returned non-JSON body (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from e

        if response.status_code >= 400:
            raise error_from_payload(body, response.status_code)

        if not isinstance(body, dict):
            raise TransportError(f"{method} {path} returned {type(body).__name__}, expected object")
        return body

    def close(self) -> None:
        self._session.close()
