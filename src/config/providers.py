"""
HTTP Client and Logging Setup

Provides:
- An httpx client preconfigured for the configuration API
- Process-wide logging configuration from settings
"""

import logging
from typing import Optional

import httpx

from .settings import APIConfig, Settings, get_settings


class HTTPClientProvider:
    """
    Factory for the configuration API HTTP client.

    The client is created lazily and reused until closed.
    """

    def __init__(self, config: APIConfig = None, transport: Optional[httpx.BaseTransport] = None):
        self.config = config or get_settings().api
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def get_client(self) -> httpx.Client:
        """Get HTTP client instance (lazy initialization)."""
        if self._client is None or self._client.is_closed:
            self._client = self._create_client()
        return self._client

    def _create_client(self) -> httpx.Client:
        headers = {"Accept": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key.get_secret_value()}"

        return httpx.Client(
            base_url=self.config.base_url,
            headers=headers,
            timeout=self.config.timeout,
            transport=self._transport
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def get_http_client(config: APIConfig = None, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """Convenience function to get a configured HTTP client."""
    return HTTPClientProvider(config, transport).get_client()


def configure_logging(settings: Settings = None) -> None:
    """Apply the configured log level and format to the root logger."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.value)
    logging.basicConfig(
        level=level,
        format=settings.log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
