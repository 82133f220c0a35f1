"""
Configuration Management

Centralized configuration for:
- Configuration API connection (base URL, credentials, timeouts)
- Logging
- Builder defaults
"""

from .settings import (
    Settings,
    APIConfig,
    LogLevel,
    get_settings
)
from .providers import (
    HTTPClientProvider,
    get_http_client,
    configure_logging
)

__all__ = [
    "Settings",
    "APIConfig",
    "LogLevel",
    "get_settings",
    "HTTPClientProvider",
    "get_http_client",
    "configure_logging"
]
