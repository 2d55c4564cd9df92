from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, ConfigDict, Field

from graph_http.core.interfaces.model_bases import DomainModel


class RequestOptions(DomainModel):
    """Per-call options recognized by every HTTP service.

    ``engine_options`` is handed straight to the engine transport and is
    accepted under its historical name ``typhoeus_options`` as well.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    rest_api: bool = False
    use_ssl: bool = False
    engine_options: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("engine_options", "typhoeus_options"),
    )

    @classmethod
    def coerce(
        cls, options: RequestOptions | Mapping[str, Any] | None
    ) -> RequestOptions:
        """Normalize the ``options`` argument of ``make_request``."""
        if options is None:
            return cls()
        if isinstance(options, RequestOptions):
            return options
        # None values mean "not given" for callers passing loose dicts
        return cls.model_validate(
            {key: value for key, value in options.items() if value is not None}
        )
