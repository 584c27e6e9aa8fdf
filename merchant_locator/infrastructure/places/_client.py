"""
HTTP client for the merchant search (Places) API.

Each call is signed by the caller and sent once: there are no retries,
the search endpoint is not assumed idempotent and a non-2xx answer is
returned verbatim for diagnosis. Timeouts and connection failures are
reported as a :class:`TransportError` result instead of being raised.
"""

import json
from typing import Any

import requests

from ...entities import TransportError, UpstreamError, UpstreamResult, UpstreamSuccess
from ...utils.logging_utils import get_logger

logger = get_logger()

DEFAULT_TIMEOUT = 5.0


def parse_body(text: str) -> Any:
    """JSON body, or ``{"raw": text}`` when the upstream did not answer JSON."""
    try:
        return json.loads(text)
    except ValueError:
        return {"raw": text}


class PlacesClient:

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        """
        Args:
            timeout: seconds to wait for connecting to and reading from the upstream API.
            session: HTTP session to reuse, a new one is created by default.
        """
        self._timeout = timeout
        self._session = session or requests.Session()

    def get(self, url: str, authorization: str) -> UpstreamResult:
        headers = {
            "Authorization": authorization,
            "Accept": "application/json",
        }

        try:
            response = self._session.request("GET", url, headers=headers, timeout=self._timeout)
        except requests.Timeout as error:
            logger.warning("GET %s timed out after %.1fs", url, self._timeout)
            return TransportError(url, error, timed_out=True)
        except requests.RequestException as error:
            logger.warning("GET %s failed: %s", url, type(error).__name__)
            return TransportError(url, error)

        body = parse_body(response.text)

        if not 200 <= response.status_code < 300:
            logger.warning("GET %s returned %d %s", url, response.status_code, response.reason)
            return UpstreamError(url, response.status_code, response.reason or "", body)

        logger.debug("GET %s returned %d", url, response.status_code)
        return UpstreamSuccess(url, response.status_code, body)

    def close(self):
        self._session.close()
