from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from graph_http.connectors.base import HTTPService
from graph_http.core.common.exceptions import TransportError
from graph_http.core.config.app_config import ServiceConfig
from graph_http.core.domain.parameters import (
    encode_multipart_params,
    encode_query_params,
    requires_multipart,
)
from graph_http.core.domain.request_options import RequestOptions
from graph_http.core.domain.response_envelope import ResponseEnvelope

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class DirectHTTPService(HTTPService):
    """Service that talks to the API server over a dedicated connection.

    Every call opens its own ``httpx.Client``, sends one request and closes
    the connection again. Multipart file uploads are supported natively.
    """

    backend_type: str = "direct"

    def __init__(
        self,
        config: ServiceConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(config)
        # Custom transports are used by embedding applications (proxies, mocks)
        self._transport = transport

    def make_request(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        verb: str = "get",
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> ResponseEnvelope:
        options = RequestOptions.coerce(options)
        verb, params = self.normalize_verb(verb, params)

        secure = self.use_ssl(params, options)
        server = self.server_for(options)
        base_url = f"{'https' if secure else 'http'}://{server}:{self.port_for(secure)}"

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%s %s%s via %s (multipart=%s)",
                verb.upper(),
                base_url,
                path,
                self.backend_type,
                verb == "post" and requires_multipart(params),
            )

        try:
            with httpx.Client(
                base_url=base_url,
                verify=self.verify_certificates,
                timeout=self.config.timeout,
                transport=self._transport,
            ) as client:
                response = self._send(client, path, params, verb)
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{verb.upper()} {path} failed: {exc}",
                backend_name=self.backend_type,
                url=f"{base_url}{path}",
            ) from exc

        return ResponseEnvelope.from_httpx(response)

    def _send(
        self,
        client: httpx.Client,
        path: str,
        params: dict[str, Any],
        verb: str,
    ) -> httpx.Response:
        if verb == "get":
            query = encode_query_params(params)
            return client.get(f"{path}?{query}" if query else path)

        if requires_multipart(params):
            with encode_multipart_params(params) as form:
                return client.post(path, data=form.data(), files=form.files)

        return client.post(
            path,
            content=encode_query_params(params),
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )
