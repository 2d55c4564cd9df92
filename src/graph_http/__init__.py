"""HTTP request layer for the Graph and REST API servers.

Two interchangeable services issue the calls: ``DirectHTTPService`` opens a
dedicated httpx connection per request, ``EngineHTTPService`` reuses pooled
requests sessions and hands file uploads to the direct service.
"""

from graph_http.connectors import DirectHTTPService, EngineHTTPService, HTTPService
from graph_http.core.common.exceptions import (
    ConfigurationError,
    GraphHTTPError,
    TransportError,
)
from graph_http.core.config.app_config import AppConfig, ServiceConfig, load_config
from graph_http.core.domain import FileDescriptor, RequestOptions, ResponseEnvelope
from graph_http.core.services.http_service_registry import (
    create_http_service,
    http_service_registry,
)

__all__ = [
    "AppConfig",
    "ConfigurationError",
    "DirectHTTPService",
    "EngineHTTPService",
    "FileDescriptor",
    "GraphHTTPError",
    "HTTPService",
    "RequestOptions",
    "ResponseEnvelope",
    "ServiceConfig",
    "TransportError",
    "create_http_service",
    "http_service_registry",
    "load_config",
]
