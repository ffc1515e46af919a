"""Upstream collaborator package - export only."""

from .circuit_breaker import CircuitBreaker
from .exceptions import (
    UpstreamConnectionError,
    UpstreamError,
    UpstreamFaultError,
    UpstreamTimeoutError,
)
from .http_client import SharedHttpClient, get_shared_http_client, shutdown_shared_http_client
from .puphax_client import PuphaxSoapClient

__all__ = [
    "CircuitBreaker",
    "UpstreamError",
    "UpstreamConnectionError",
    "UpstreamTimeoutError",
    "UpstreamFaultError",
    "SharedHttpClient",
    "get_shared_http_client",
    "shutdown_shared_http_client",
    "PuphaxSoapClient",
]
