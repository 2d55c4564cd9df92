from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from graph_http.core.domain.request_options import RequestOptions
    from graph_http.core.domain.response_envelope import ResponseEnvelope


class IHTTPService(ABC):
    """Contract shared by every transport that can issue API calls."""

    backend_type: str

    @abstractmethod
    def make_request(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        verb: str = "get",
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> ResponseEnvelope:
        pass

    @abstractmethod
    def close(self) -> None:
        pass
