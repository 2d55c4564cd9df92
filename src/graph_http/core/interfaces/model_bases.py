"""Nominal marker base class for pydantic models used by the library.

Configuration sections and per-request option models derive from
`DomainModel` so type checkers can tell them apart from plain dicts.
"""

from __future__ import annotations

from pydantic import BaseModel


class DomainModel(BaseModel):
    """Nominal marker for Pydantic-based configuration and option models."""

    def __repr__(self) -> str:
        """Provide a concise, one-line summary of the object."""
        fields = ", ".join(
            f"{name}={getattr(self, name)!r}"
            for name in type(self).model_fields
            if not isinstance(getattr(self, name), BaseModel)
        )
        return f"<{self.__class__.__name__} {fields}>"
