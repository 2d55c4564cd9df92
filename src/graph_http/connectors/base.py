from __future__ import annotations

import abc
import logging
from collections.abc import Mapping
from typing import Any

from graph_http.core.config.app_config import ServiceConfig
from graph_http.core.constants import HTTP_PORT, HTTPS_PORT, SUPPORTED_VERBS
from graph_http.core.domain.request_options import RequestOptions
from graph_http.core.domain.response_envelope import ResponseEnvelope
from graph_http.core.interfaces.http_service_interface import IHTTPService

logger = logging.getLogger(__name__)


class HTTPService(IHTTPService):
    """
    Abstract base class for HTTP services.
    Holds the request policy both transports share: verb tunnelling,
    the per-request TLS decision and server selection.
    """

    backend_type: str

    def __init__(self, config: ServiceConfig | None = None) -> None:
        self.config = config if config is not None else ServiceConfig()
        if self.config.insecure_skip_verify:
            logger.warning(
                "%s service created with insecure_skip_verify=True: TLS "
                "certificates will NOT be verified",
                self.backend_type,
            )

    @abc.abstractmethod
    def make_request(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        verb: str = "get",
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> ResponseEnvelope:
        """
        Sends a request to the API server and wraps the reply.

        Args:
            path: Absolute request path on the server, e.g. ``/me``.
            params: Parameter map; values may be file descriptors.
            verb: HTTP verb. Anything other than get/post is sent as a POST
                carrying a ``method`` parameter.
            options: Per-call options (``rest_api``, ``use_ssl``,
                ``engine_options``).

        Returns:
            The status, body and headers of the reply.

        Raises:
            TransportError: If the call could not be completed.
        """

    def close(self) -> None:
        """Release transport resources; the base service holds none."""

    def __enter__(self) -> HTTPService:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @staticmethod
    def normalize_verb(
        verb: str, params: Mapping[str, Any] | None
    ) -> tuple[str, dict[str, Any]]:
        """Return the verb to send and a copy of ``params`` to send with it.

        Verbs other than get/post are tunnelled through POST with the original
        verb in a ``method`` parameter.
        """
        verb = verb.lower()
        outgoing = dict(params or {})
        if verb not in SUPPORTED_VERBS:
            outgoing["method"] = verb
            verb = "post"
        return verb, outgoing

    def use_ssl(self, params: Mapping[str, Any] | None, options: RequestOptions) -> bool:
        """Return True if the request must travel over TLS.

        Requests carrying an access token are private; everything else goes
        over plain HTTP unless the service or the call asks for TLS.
        """
        return bool(
            (params or {}).get("access_token") is not None
            or self.config.always_use_ssl
            or options.use_ssl
        )

    def server_for(self, options: RequestOptions) -> str:
        return self.config.rest_server if options.rest_api else self.config.graph_server

    @staticmethod
    def port_for(secure: bool) -> int:
        return HTTPS_PORT if secure else HTTP_PORT

    @property
    def verify_certificates(self) -> bool:
        return not self.config.insecure_skip_verify
