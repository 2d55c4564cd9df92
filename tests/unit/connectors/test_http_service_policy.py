import logging

import pytest
from graph_http.connectors.base import HTTPService
from graph_http.core.config.app_config import ServiceConfig
from graph_http.core.domain.request_options import RequestOptions
from graph_http.core.domain.response_envelope import ResponseEnvelope


class RecordingService(HTTPService):
    """Concrete service that only records what it was asked to send."""

    backend_type = "recording"

    def make_request(self, path, params=None, verb="get", options=None):
        return ResponseEnvelope(200, b"", {})


@pytest.fixture
def service() -> RecordingService:
    return RecordingService()


class TestNormalizeVerb:
    @pytest.mark.parametrize("verb", ["get", "post", "GET", "Post"])
    def test_get_and_post_are_kept(self, verb: str) -> None:
        normalized, params = HTTPService.normalize_verb(verb, {"a": "1"})
        assert normalized == verb.lower()
        assert params == {"a": "1"}

    @pytest.mark.parametrize("verb", ["delete", "PUT", "patch"])
    def test_other_verbs_are_tunnelled_through_post(self, verb: str) -> None:
        normalized, params = HTTPService.normalize_verb(verb, {"a": "1"})
        assert normalized == "post"
        assert params == {"a": "1", "method": verb.lower()}

    def test_caller_params_are_not_mutated(self) -> None:
        original = {"a": "1"}
        HTTPService.normalize_verb("delete", original)
        assert original == {"a": "1"}

    def test_none_params(self) -> None:
        assert HTTPService.normalize_verb("delete", None) == (
            "post",
            {"method": "delete"},
        )


class TestUseSSL:
    def test_access_token_makes_request_secure(self, service: RecordingService) -> None:
        assert service.use_ssl({"access_token": "X"}, RequestOptions())

    def test_plain_request_is_insecure(self, service: RecordingService) -> None:
        assert not service.use_ssl({"q": "x"}, RequestOptions())
        assert not service.use_ssl(None, RequestOptions())

    def test_per_call_option(self, service: RecordingService) -> None:
        assert service.use_ssl({}, RequestOptions(use_ssl=True))

    def test_service_wide_flag(self) -> None:
        service = RecordingService(ServiceConfig(always_use_ssl=True))
        assert service.use_ssl({}, RequestOptions())

    def test_flag_is_per_instance(self) -> None:
        RecordingService(ServiceConfig(always_use_ssl=True))
        assert not RecordingService().use_ssl({}, RequestOptions())


def test_server_selection(service: RecordingService) -> None:
    assert service.server_for(RequestOptions()) == "graph.facebook.com"
    assert service.server_for(RequestOptions(rest_api=True)) == "api.facebook.com"


def test_ports() -> None:
    assert HTTPService.port_for(True) == 443
    assert HTTPService.port_for(False) == 80


def test_certificates_verified_by_default(service: RecordingService) -> None:
    assert service.verify_certificates is True


def test_insecure_mode_is_loud(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="graph_http.connectors.base"):
        service = RecordingService(ServiceConfig(insecure_skip_verify=True))
    assert service.verify_certificates is False
    assert "NOT be verified" in caplog.text


def test_context_manager_closes(service: RecordingService) -> None:
    with service as entered:
        assert entered is service
