# Domain package

from .parameters import (
    FileDescriptor,
    MultipartForm,
    as_file_descriptor,
    encode_multipart_params,
    encode_query_params,
    is_valid_file_descriptor,
    requires_multipart,
)
from .request_options import RequestOptions
from .response_envelope import ResponseEnvelope

__all__ = [
    "FileDescriptor",
    "MultipartForm",
    "RequestOptions",
    "ResponseEnvelope",
    "as_file_descriptor",
    "encode_multipart_params",
    "encode_query_params",
    "is_valid_file_descriptor",
    "requires_multipart",
]
