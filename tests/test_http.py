"""Tests for the shared HTTP session."""

from __future__ import annotations

from unittest.mock import patch

import requests
from urllib3.util.retry import Retry

from wuweather.services.http import (
    DEFAULT_HEADERS,
    DEFAULT_RETRY,
    DEFAULT_TIMEOUT,
    create_session,
    session,
)


class TestDefaultRetry:
    """Verify retry strategy configuration."""

    def test_total_retries(self) -> None:
        assert DEFAULT_RETRY.total == 3

    def test_retries_on_server_errors_and_rate_limit(self) -> None:
        for status in (429, 502, 503, 504):
            assert status in DEFAULT_RETRY.status_forcelist

    def test_final_status_is_returned_not_raised(self) -> None:
        assert DEFAULT_RETRY.raise_on_status is False

    def test_only_reads_are_retried(self) -> None:
        assert "GET" in DEFAULT_RETRY.allowed_methods
        assert "POST" not in DEFAULT_RETRY.allowed_methods


class TestCreateSession:
    """Verify session factory."""

    def test_returns_session(self) -> None:
        assert isinstance(create_session(), requests.Session)

    def test_both_schemes_use_retry_adapter(self) -> None:
        s = create_session()
        for url in ("http://api.wunderground.com", "https://api.wunderground.com"):
            adapter = s.get_adapter(url)
            assert isinstance(adapter, requests.adapters.HTTPAdapter)
            assert adapter.max_retries.total == 3

    def test_custom_retry(self) -> None:
        s = create_session(retry=Retry(total=7))
        assert s.get_adapter("http://example.com").max_retries.total == 7

    def test_requests_compressed_responses(self) -> None:
        s = create_session()
        assert s.headers["Accept-Encoding"] == "gzip, deflate"
        assert s.headers["User-Agent"] == DEFAULT_HEADERS["User-Agent"]

    def test_default_timeout_injected(self) -> None:
        s = create_session(timeout=42)
        prep = requests.Request("GET", "http://example.com").prepare()
        with patch.object(
            requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
        ) as mock_send:
            s.send(prep)
            _, kwargs = mock_send.call_args
            assert kwargs.get("timeout") == 42

    def test_explicit_timeout_not_overridden(self) -> None:
        s = create_session(timeout=42)
        prep = requests.Request("GET", "http://example.com").prepare()
        with patch.object(
            requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
        ) as mock_send:
            s.send(prep, timeout=5)
            _, kwargs = mock_send.call_args
            assert kwargs.get("timeout") == 5


class TestModuleSession:
    """Verify the module-level singleton."""

    def test_session_is_configured(self) -> None:
        assert session.get_adapter("http://example.com").max_retries.total == 3

    def test_default_timeout(self) -> None:
        assert DEFAULT_TIMEOUT == 30
