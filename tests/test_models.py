"""Tests for configuration, request and error models."""

import pytest
from pagefetch.errors import HttpStatusError, NoResponseError, PagefetchError, RequestValidationError
from pagefetch.models.config import NetworkConfig, PagefetchConfig
from pagefetch.models.request import FetchRequest, validate_url
from pydantic import ValidationError


class TestPagefetchConfig:
    """Tests for PagefetchConfig."""

    def test_default_config(self):
        """Test default values."""
        config = PagefetchConfig()
        assert config.default_timeout_ms == 30000
        assert config.network.max_redirects == 5
        assert config.extraction.char_threshold == 500
        assert config.log_level == "INFO"

    def test_nested_sections(self):
        """Test nested sections accept dicts."""
        config = PagefetchConfig(network={"user_agent": "agent/1.0", "max_redirects": 2})
        assert config.network.user_agent == "agent/1.0"
        assert config.network.max_redirects == 2

    def test_rejects_unknown_fields(self):
        """Test unknown keys are errors."""
        with pytest.raises(ValidationError):
            PagefetchConfig(network={"proxy": "http://localhost:8080"})

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            PagefetchConfig(default_timeout_ms=0)

    def test_yaml_round_trip(self):
        """Test YAML serialization keeps custom values."""
        config = PagefetchConfig(default_timeout_ms=10000, extraction={"char_threshold": 250})
        loaded = PagefetchConfig.from_yaml(config.to_yaml())
        assert loaded == config

    def test_from_yaml_file(self, tmp_path):
        """Test loading a YAML file."""
        path = tmp_path / "pagefetch.yaml"
        path.write_text("default_timeout_ms: 5000\nnetwork:\n  max_redirects: 3\n")

        config = PagefetchConfig.from_yaml_file(path)

        assert config.default_timeout_ms == 5000
        assert config.network.max_redirects == 3

    def test_empty_yaml(self):
        """Test an empty document gives defaults."""
        assert PagefetchConfig.from_yaml("") == PagefetchConfig()


class TestNetworkConfig:
    """Tests for NetworkConfig."""

    def test_request_headers(self):
        """Test the outbound header set."""
        headers = NetworkConfig(user_agent="agent/1.0").request_headers()
        assert headers == {
            "User-Agent": "agent/1.0",
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "Accept-Encoding": "gzip, deflate, br",
        }


class TestFetchRequest:
    """Tests for FetchRequest."""

    def test_defaults(self):
        request = FetchRequest(url="https://example.com")
        assert request.include_metadata is False
        assert request.simplify is True
        assert request.timeout_ms == 30000
        assert request.timeout_seconds == 30.0

    def test_strips_url(self):
        assert FetchRequest(url="  https://example.com/a  ").url == "https://example.com/a"

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "example.com",
            "ftp://example.com/file",
            "file:///etc/passwd",
            "https://",
            "https://exa mple.com/",
            "http://example.com:99999/",
        ],
    )
    def test_rejects_bad_urls(self, url):
        with pytest.raises(RequestValidationError):
            FetchRequest.build(url=url)

    def test_build_error_message(self):
        """Test validation details name the field without pydantic prefixes."""
        with pytest.raises(RequestValidationError) as exc_info:
            FetchRequest.build(url="ftp://example.com")
        message = str(exc_info.value)
        assert message.startswith("url: Scheme 'ftp' not allowed")
        assert "Value error" not in message

    def test_build_reports_every_problem(self):
        with pytest.raises(RequestValidationError) as exc_info:
            FetchRequest.build(url="nope", timeout_ms=0)
        assert "url:" in str(exc_info.value)
        assert "timeout_ms:" in str(exc_info.value)

    def test_frozen(self):
        request = FetchRequest(url="https://example.com")
        with pytest.raises(ValidationError):
            request.url = "https://other.example.com"

    def test_validate_url_accepts_http_and_https(self):
        assert validate_url("http://example.com") == "http://example.com"
        assert validate_url("https://example.com/path?q=1#frag") == "https://example.com/path?q=1#frag"


class TestErrors:
    """Tests for the error taxonomy."""

    def test_http_status_message(self):
        error = HttpStatusError(503, "Service Unavailable")
        assert str(error) == "HTTP 503: Service Unavailable"
        assert error.status == 503
        assert isinstance(error, PagefetchError)

    def test_no_response_message(self):
        assert str(NoResponseError()) == "No response received from server"
