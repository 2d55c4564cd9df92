"""
Parameter policy shared by every HTTP service.

Decides whether a parameter map needs a multipart body and renders a map
either as a form-urlencoded string or as multipart fields and file parts.
A file to upload is described by a ``FileDescriptor`` or by any mapping
with the same keys:

- ``content_type`` and ``path`` where ``path`` is a readable local file.
- ``content_type``, ``path`` and ``file``, an already opened stream with
  ``read()``. ``path`` still names the uploaded file in that case.

Anything that does not match one of those shapes is sent as a plain value.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any
from urllib.parse import quote

logger = logging.getLogger(__name__)

FILE_DESCRIPTOR_KEYS = ("content_type", "path")


def _is_readable(stream: Any) -> bool:
    return callable(getattr(stream, "read", None))


@dataclass(frozen=True)
class FileDescriptor:
    """A file to upload, either by local path or by an open stream."""

    content_type: str
    path: str
    file: IO[bytes] | None = None

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    def is_valid(self) -> bool:
        return self.file is None or _is_readable(self.file)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> FileDescriptor:
        return cls(
            content_type=value["content_type"],
            path=value["path"],
            file=value.get("file"),
        )


def is_valid_file_descriptor(value: Any) -> bool:
    """Return True if ``value`` describes a file that can be uploaded."""
    if isinstance(value, FileDescriptor):
        return value.is_valid()
    if not isinstance(value, Mapping):
        return False
    if not all(key in value for key in FILE_DESCRIPTOR_KEYS):
        return False
    return "file" not in value or _is_readable(value["file"])


def as_file_descriptor(value: Any) -> FileDescriptor | None:
    """Return ``value`` as a FileDescriptor, or None if it is a plain value."""
    if not is_valid_file_descriptor(value):
        return None
    if isinstance(value, FileDescriptor):
        return value
    return FileDescriptor.from_mapping(value)


def _looks_like_file_descriptor(value: Any) -> bool:
    if isinstance(value, FileDescriptor):
        return True
    return isinstance(value, Mapping) and any(
        key in value for key in (*FILE_DESCRIPTOR_KEYS, "file")
    )


def requires_multipart(params: Mapping[str, Any] | None) -> bool:
    """Return True if any parameter value is a valid file descriptor."""
    multipart = False
    for key, value in (params or {}).items():
        if is_valid_file_descriptor(value):
            multipart = True
        elif _looks_like_file_descriptor(value) and logger.isEnabledFor(
            logging.DEBUG
        ):
            # Malformed descriptors are still sent as plain values
            logger.debug(
                "Parameter '%s' resembles a file upload but is not a valid "
                "file descriptor; sending it as a plain value",
                key,
            )
    return multipart


def stringify_param(value: Any) -> str:
    """Render a parameter value as text; anything but ``str`` becomes JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def encode_query_params(params: Mapping[str, Any] | None) -> str:
    """Encode ``params`` as an ``&``-joined, percent-escaped ``key=value`` string.

    Entries follow the iteration order of ``params``. ``None`` or an empty
    mapping yields an empty string.
    """
    return "&".join(
        f"{quote(str(key), safe='')}={quote(stringify_param(value), safe='')}"
        for key, value in (params or {}).items()
    )


@dataclass
class MultipartForm:
    """Fields and file parts of a multipart/form-data body.

    ``files`` maps a field name to ``(filename, stream, content_type)``.
    Streams opened from a path are owned by the form and closed by
    :meth:`close`; streams supplied by the caller are left open.
    """

    fields: dict[str, Any] = field(default_factory=dict)
    files: dict[str, tuple[str, IO[bytes], str]] = field(default_factory=dict)
    _owned_streams: list[IO[bytes]] = field(default_factory=list, repr=False)

    def data(self) -> dict[str, str]:
        """Plain fields rendered as text for the multipart body."""
        return {key: stringify_param(value) for key, value in self.fields.items()}

    def field_names(self) -> set[str]:
        return set(self.fields) | set(self.files)

    def close(self) -> None:
        while self._owned_streams:
            self._owned_streams.pop().close()

    def __enter__(self) -> MultipartForm:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def encode_multipart_params(params: Mapping[str, Any] | None) -> MultipartForm:
    """Split ``params`` into multipart fields and file parts.

    Raises:
        OSError: If a descriptor without a stream names an unreadable path.
    """
    form = MultipartForm()
    try:
        for key, value in (params or {}).items():
            descriptor = as_file_descriptor(value)
            if descriptor is None:
                form.fields[str(key)] = value
                continue

            if descriptor.file is not None:
                stream = descriptor.file
            else:
                stream = Path(descriptor.path).open("rb")
                form._owned_streams.append(stream)
            form.files[str(key)] = (
                descriptor.filename,
                stream,
                descriptor.content_type,
            )
    except OSError:
        form.close()
        raise
    return form
