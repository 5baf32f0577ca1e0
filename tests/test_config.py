"""Tests for chaosmonkey.config — configuration resolution."""

from __future__ import annotations

import httpx
import pytest
from pydantic import ValidationError

from chaosmonkey.config import (
    DEFAULT_ENDPOINT,
    DEFAULT_USER_AGENT,
    ClientConfig,
    default_config,
    default_http_client,
    normalize_endpoint,
    resolve_config,
)


class TestDefaultConfig:
    def test_builtin_defaults(self) -> None:
        config = default_config({})
        assert config.endpoint == DEFAULT_ENDPOINT
        assert config.user_agent == DEFAULT_USER_AGENT
        assert config.username == ""
        assert config.password == ""
        assert config.http_client is default_http_client()

    def test_environment_overrides(self) -> None:
        config = default_config(
            {
                "CHAOSMONKEY_ENDPOINT": "chaos.internal:9000",
                "CHAOSMONKEY_USERNAME": "alice",
                "CHAOSMONKEY_PASSWORD": "s3cret",
            }
        )
        assert config.endpoint == "chaos.internal:9000"
        assert config.username == "alice"
        assert config.password == "s3cret"

    def test_empty_environment_value_ignored(self) -> None:
        config = default_config({"CHAOSMONKEY_ENDPOINT": ""})
        assert config.endpoint == DEFAULT_ENDPOINT

    def test_reads_os_environ_on_every_call(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CHAOSMONKEY_ENDPOINT", "first:1")
        assert default_config().endpoint == "first:1"
        monkeypatch.setenv("CHAOSMONKEY_ENDPOINT", "second:2")
        assert default_config().endpoint == "second:2"


class TestNormalizeEndpoint:
    @pytest.mark.parametrize(
        ("given", "expected"),
        [
            ("foo.example.com:9090", "http://foo.example.com:9090"),
            ("http://foo.example.com", "http://foo.example.com"),
            ("https://foo.example.com", "https://foo.example.com"),
            ("HTTPS://foo.example.com", "HTTPS://foo.example.com"),
            ("127.0.0.1:8080", "http://127.0.0.1:8080"),
        ],
    )
    def test_scheme_added_only_when_missing(self, given: str, expected: str) -> None:
        assert normalize_endpoint(given) == expected


class TestResolveConfig:
    def test_no_caller_values_uses_environment(self) -> None:
        config = resolve_config(environ={"CHAOSMONKEY_ENDPOINT": "foo.example.com:9090"})
        assert config.endpoint == "http://foo.example.com:9090"

    def test_https_endpoint_left_unmodified(self) -> None:
        config = resolve_config(ClientConfig(endpoint="https://chaos.example.com"), environ={})
        assert config.endpoint == "https://chaos.example.com"

    def test_caller_value_beats_environment(self) -> None:
        config = resolve_config(
            ClientConfig(endpoint="http://mine:1", username="bob", password="pw"),
            environ={
                "CHAOSMONKEY_ENDPOINT": "theirs:2",
                "CHAOSMONKEY_USERNAME": "alice",
                "CHAOSMONKEY_PASSWORD": "other",
            },
        )
        assert config.endpoint == "http://mine:1"
        assert config.username == "bob"
        assert config.password == "pw"

    def test_partial_credentials_filled_per_field(self) -> None:
        config = resolve_config(
            ClientConfig(username="bob"),
            environ={"CHAOSMONKEY_PASSWORD": "from-env"},
        )
        assert config.username == "bob"
        assert config.password == "from-env"

    def test_every_field_resolved(self) -> None:
        config = resolve_config(environ={})
        assert config.endpoint == DEFAULT_ENDPOINT
        assert config.user_agent == DEFAULT_USER_AGENT
        assert config.http_client is not None
        assert config.region == ""

    def test_custom_user_agent_and_client_kept(self) -> None:
        custom = httpx.Client()
        config = resolve_config(
            ClientConfig(user_agent="my-tool/1.0", http_client=custom, region="us-west-2"),
            environ={},
        )
        assert config.user_agent == "my-tool/1.0"
        assert config.http_client is custom
        assert config.region == "us-west-2"

    def test_input_not_modified(self) -> None:
        given = ClientConfig(endpoint="foo:1")
        resolve_config(given, environ={})
        assert given.endpoint == "foo:1"
        assert given.user_agent == ""

    def test_config_is_frozen(self) -> None:
        config = resolve_config(environ={})
        with pytest.raises(ValidationError):
            config.endpoint = "http://elsewhere"  # type: ignore[misc]
