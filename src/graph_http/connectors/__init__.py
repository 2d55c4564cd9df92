from .base import HTTPService
from .direct import DirectHTTPService
from .engine import EngineHTTPService, SessionPool

__all__ = ["DirectHTTPService", "EngineHTTPService", "HTTPService", "SessionPool"]
