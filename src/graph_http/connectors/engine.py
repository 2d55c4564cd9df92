from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from http.cookiejar import DefaultCookiePolicy
from typing import Any

import requests
from requests.structures import CaseInsensitiveDict

from graph_http.connectors.base import HTTPService
from graph_http.connectors.direct import FORM_CONTENT_TYPE, DirectHTTPService
from graph_http.core.common.exceptions import TransportError
from graph_http.core.config.app_config import ServiceConfig
from graph_http.core.domain.parameters import encode_query_params, requires_multipart
from graph_http.core.domain.request_options import RequestOptions
from graph_http.core.domain.response_envelope import ResponseEnvelope

logger = logging.getLogger(__name__)


class SessionPool:
    """Lightweight pool that reuses requests sessions per host.

    Pooled sessions never store cookies, so a `Set-Cookie` from one call is
    not replayed on a later call that happens to reuse the session.
    """

    def __init__(self, max_per_host: int = 4) -> None:
        self._lock = threading.Lock()
        self._pool: dict[str, list[requests.Session]] = {}
        self._max_per_host = max_per_host

    @staticmethod
    def _new_session() -> requests.Session:
        session = requests.Session()
        session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        return session

    @contextmanager
    def lease(self, host: str) -> Iterator[requests.Session]:
        """Yield a session for ``host`` and return it to the pool afterwards."""
        key = host.lower()
        with self._lock:
            stack = self._pool.get(key)
            session = stack.pop() if stack else self._new_session()
        try:
            yield session
        finally:
            session.cookies.clear()
            with self._lock:
                stack = self._pool.setdefault(key, [])
                if len(stack) < self._max_per_host:
                    stack.append(session)
                else:
                    session.close()

    def clear(self) -> None:
        """Close and forget all pooled sessions."""
        with self._lock:
            for stack in self._pool.values():
                for session in stack:
                    session.close()
            self._pool.clear()


class EngineHTTPService(HTTPService):
    """Service that dispatches requests through pooled ``requests`` sessions.

    Connections are kept alive between calls, which makes this the faster
    choice for many small requests. Multipart uploads are handed to a private
    :class:`DirectHTTPService` built from the same configuration.
    """

    backend_type: str = "engine"

    def __init__(
        self,
        config: ServiceConfig | None = None,
        session_pool: SessionPool | None = None,
        multipart_service: DirectHTTPService | None = None,
    ) -> None:
        super().__init__(config)
        self._sessions = session_pool if session_pool is not None else SessionPool()
        self._multipart_service = (
            multipart_service
            if multipart_service is not None
            else DirectHTTPService(self.config)
        )

    def make_request(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        verb: str = "get",
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> ResponseEnvelope:
        if requires_multipart(params):
            # File uploads always go through the direct service, untouched
            logger.debug("Delegating multipart %s %s to direct service", verb, path)
            return self._multipart_service.make_request(path, params, verb, options)

        options = RequestOptions.coerce(options)
        verb, params = self.normalize_verb(verb, params)
        server = self.server_for(options)
        prefix = "https" if self.use_ssl(params, options) else "http"
        url = f"{prefix}://{server}{path}"

        # Caller supplied engine options win over the defaults
        engine_options: dict[str, Any] = {"params": params, **options.engine_options}

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%s %s via %s (engine options: %s)",
                verb.upper(),
                url,
                self.backend_type,
                sorted(engine_options),
            )

        try:
            with self._sessions.lease(server) as session:
                response = self._dispatch(session, verb, url, engine_options)
        except requests.RequestException as exc:
            raise TransportError(
                f"{verb.upper()} {path} failed: {exc}",
                backend_name=self.backend_type,
                url=url,
            ) from exc

        return ResponseEnvelope.from_requests(response)

    def _dispatch(
        self,
        session: requests.Session,
        verb: str,
        url: str,
        engine_options: dict[str, Any],
    ) -> requests.Response:
        kwargs = dict(engine_options)
        params = kwargs.pop("params", None)
        if isinstance(params, Mapping):
            params = encode_query_params(params)

        kwargs.setdefault("timeout", self.config.timeout)
        kwargs.setdefault("verify", self.verify_certificates)

        if verb == "get":
            kwargs["params"] = params or None
        else:
            headers = CaseInsensitiveDict(kwargs.pop("headers", None) or {})
            headers.setdefault("Content-Type", FORM_CONTENT_TYPE)
            kwargs["headers"] = headers
            kwargs["data"] = params or ""

        return session.request(verb.upper(), url, **kwargs)

    def close(self) -> None:
        self._sessions.clear()
        self._multipart_service.close()
