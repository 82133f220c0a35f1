"""
Configuration API Client

Thin JSON client over the external configuration API. The API is treated as
an opaque collaborator: one request per call, no retry, no queuing and no
cancellation. Whatever the API stores last wins.

Failures are mapped onto the error taxonomy:
- non-success status -> PersistenceError carrying the server's message
- transport failure   -> TransportError with a generic message
- unreadable record    -> PersistenceError naming the record
"""

import logging
from typing import Any, Callable, Optional

import httpx

from ..config.providers import HTTPClientProvider
from ..config.settings import APIConfig
from ..core.errors import PersistenceError, TransportError

logger = logging.getLogger(__name__)

# Keys checked, in order, for an error message in a failure body
ERROR_MESSAGE_KEYS = ("message", "error", "detail")


def extract_error_message(response: httpx.Response, default: str) -> str:
    """Pull a human readable message out of an error response, if any."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text or default

    if isinstance(body, dict):
        for key in ERROR_MESSAGE_KEYS:
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
    return default


class APIClient:
    """Base class for resource clients sharing one HTTP client."""

    def __init__(
        self,
        http_client: Optional[httpx.Client] = None,
        config: Optional[APIConfig] = None
    ):
        if http_client is None:
            self._provider = HTTPClientProvider(config)
            http_client = self._provider.get_client()
            config = self._provider.config
        else:
            self._provider = None
        self._http = http_client
        self.config = config

    def close(self) -> None:
        if self._provider is not None:
            self._provider.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        failure: str,
        *,
        params: Optional[dict] = None,
        json: Any = None,
        allow_not_found: bool = False
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        With allow_not_found a 404 returns None instead of raising.
        """
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = self._http.request(method, path, params=params, json=json)
        except httpx.TransportError as e:
            logger.warning("%s: transport failure on %s %s: %s", failure, method, path, e)
            raise TransportError() from e

        if allow_not_found and response.status_code == 404:
            return None

        if response.is_error:
            message = extract_error_message(response, failure)
            logger.warning("%s: %s %s returned %s", failure, method, path, response.status_code)
            raise PersistenceError(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise PersistenceError(f"{failure}: invalid JSON response", response.status_code) from e

    def _decode(self, parse: Callable[[Any], Any], body: Any, failure: str) -> Any:
        """Parse an unwrapped body, reporting records that cannot be read as a PersistenceError."""
        try:
            return parse(self._unwrap(body))
        except (TypeError, ValueError) as e:
            logger.warning("%s: %s", failure, e)
            raise PersistenceError(failure) from e

    @staticmethod
    def _unwrap(body: Any) -> Any:
        # Some deployments wrap payloads as {"data": ...}
        if isinstance(body, dict) and set(body) == {"data"}:
            return body["data"]
        return body
