# Configuration package

from graph_http.core.config.app_config import (
    AppConfig,
    LoggingConfig,
    LogLevel,
    ServiceConfig,
    load_config,
)

__all__ = ["AppConfig", "LogLevel", "LoggingConfig", "ServiceConfig", "load_config"]
