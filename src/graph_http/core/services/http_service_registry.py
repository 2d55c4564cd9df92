from collections.abc import Callable
from typing import TYPE_CHECKING

from graph_http.core.common.exceptions import ConfigurationError
from graph_http.core.common.logging_utils import get_logger
from graph_http.core.config.app_config import ServiceConfig

if TYPE_CHECKING:
    from graph_http.connectors.base import HTTPService

logger = get_logger(__name__)


class HTTPServiceRegistry:
    """A registry of named HTTP service factories."""

    def __init__(self) -> None:
        self._factories: dict[str, Callable[..., "HTTPService"]] = {}

    def register_service(
        self, name: str, factory: Callable[..., "HTTPService"]
    ) -> None:
        """Registers a service factory with the given name.

        Args:
            name: The unique name of the service (e.g., "direct", "engine").
            factory: A callable taking a ServiceConfig and returning an HTTPService.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Service name must be a non-empty string.")
        if not callable(factory):
            raise TypeError("Service factory must be a callable.")
        if name in self._factories:
            logger.warning("http_service_already_registered", name=name)
            return
        self._factories[name] = factory

    def get_service_factory(self, name: str) -> Callable[..., "HTTPService"]:
        """Retrieves the factory for a registered service.

        Raises:
            ConfigurationError: If the service name is not registered.
        """
        factory = self._factories.get(name)
        if not factory:
            raise ConfigurationError(
                f"HTTP service '{name}' is not registered.",
                details={"registered": self.get_registered_services()},
            )
        return factory

    def get_registered_services(self) -> list[str]:
        """Returns a list of names of all registered services."""
        return list(self._factories.keys())


def _default_registry() -> HTTPServiceRegistry:
    from graph_http.connectors.direct import DirectHTTPService
    from graph_http.connectors.engine import EngineHTTPService

    registry = HTTPServiceRegistry()
    registry.register_service(DirectHTTPService.backend_type, DirectHTTPService)
    registry.register_service(EngineHTTPService.backend_type, EngineHTTPService)
    return registry


# Global instance of the registry
http_service_registry = _default_registry()


def create_http_service(
    config: ServiceConfig | None = None,
    registry: HTTPServiceRegistry | None = None,
) -> "HTTPService":
    """Build the HTTP service named by ``config.http_service``."""
    config = config if config is not None else ServiceConfig()
    factory = (registry or http_service_registry).get_service_factory(
        config.http_service
    )
    return factory(config)
