import io
from pathlib import Path

import pytest
from graph_http.core.config.app_config import ServiceConfig
from graph_http.core.domain.response_envelope import ResponseEnvelope


@pytest.fixture
def service_config() -> ServiceConfig:
    """Default service configuration with the stock Graph/REST hosts."""
    return ServiceConfig()


@pytest.fixture
def upload_file(tmp_path: Path) -> Path:
    """A small file on disk to upload by path."""
    p = tmp_path / "photo.jpg"
    p.write_bytes(b"\xff\xd8fake-jpeg\xff\xd9")
    return p


@pytest.fixture
def upload_stream() -> io.BytesIO:
    return io.BytesIO(b"streamed-bytes")


@pytest.fixture
def ok_envelope() -> ResponseEnvelope:
    return ResponseEnvelope(
        status_code=200,
        body=b'{"id": "42"}',
        headers={"Content-Type": "application/json"},
    )
