from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx
    import requests


class _FrozenHeaders(Mapping[str, str]):
    """Read-only, hashable header mapping."""

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, str]) -> None:
        self._data = data

    def __getitem__(self, name: str) -> str:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        return hash(frozenset(self._data.items()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


def _freeze_headers(
    headers: Mapping[str, str] | Iterable[tuple[str, str]] | None,
) -> Mapping[str, str]:
    items = headers.items() if isinstance(headers, Mapping) else (headers or ())
    frozen: dict[str, str] = {}
    for raw_name, value in items:
        name = raw_name.lower()
        # Repeated headers collapse into one comma separated value
        frozen[name] = f"{frozen[name]}, {value}" if name in frozen else value
    return _FrozenHeaders(frozen)


@dataclass(frozen=True)
class ResponseEnvelope:
    """Transport-agnostic response container.

    Both transports return this shape, so callers never see which HTTP
    library performed the call. Fields cannot be reassigned and the header
    mapping is read-only and keyed by lower-cased header names. Envelopes
    are hashable.
    """

    status_code: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _freeze_headers(self.headers))

    @property
    def status(self) -> int:
        return self.status_code

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> ResponseEnvelope:
        return cls(
            status_code=response.status_code,
            body=response.content,
            headers=list(response.headers.multi_items()),
        )

    @classmethod
    def from_requests(cls, response: requests.Response) -> ResponseEnvelope:
        return cls(
            status_code=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )
