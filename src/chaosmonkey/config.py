"""Client configuration and its resolution against the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import lru_cache

import httpx
from pydantic import BaseModel, ConfigDict

ENV_ENDPOINT = "CHAOSMONKEY_ENDPOINT"
ENV_USERNAME = "CHAOSMONKEY_USERNAME"
ENV_PASSWORD = "CHAOSMONKEY_PASSWORD"

DEFAULT_ENDPOINT = "http://127.0.0.1:8080"
DEFAULT_USER_AGENT = "chaosmonkey Python library"


@lru_cache(maxsize=1)
def default_http_client() -> httpx.Client:
    """Return the process-wide ``httpx.Client`` used when none is configured."""
    return httpx.Client()


class ClientConfig(BaseModel):
    """Settings for a :class:`~chaosmonkey.core.ChaosMonkey` client.

    Attributes:
        endpoint:    Address and port of the Chaos Monkey API server.
        region:      Optional AWS region (ignored by vanilla Chaos Monkey).
        username:    Optional username for HTTP Basic Authentication.
        password:    Optional password for HTTP Basic Authentication.
        user_agent:  Value of the ``User-Agent`` header.
        http_client: ``httpx.Client`` used for requests. Timeouts, proxies
                     and TLS settings are taken from it.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    endpoint: str = ""
    region: str = ""
    username: str = ""
    password: str = ""
    user_agent: str = ""
    http_client: httpx.Client | None = None


def default_config(environ: Mapping[str, str] | None = None) -> ClientConfig:
    """Return the default configuration.

    The endpoint and credentials are read from ``CHAOSMONKEY_ENDPOINT``,
    ``CHAOSMONKEY_USERNAME`` and ``CHAOSMONKEY_PASSWORD`` in *environ*
    (``os.environ`` when omitted). Nothing is cached between calls.
    """
    env = os.environ if environ is None else environ
    return ClientConfig(
        endpoint=env.get(ENV_ENDPOINT) or DEFAULT_ENDPOINT,
        username=env.get(ENV_USERNAME) or "",
        password=env.get(ENV_PASSWORD) or "",
        user_agent=DEFAULT_USER_AGENT,
        http_client=default_http_client(),
    )


def normalize_endpoint(endpoint: str) -> str:
    """Prefix *endpoint* with ``http://`` unless it already has an HTTP scheme."""
    if endpoint.lower().startswith(("http://", "https://")):
        return endpoint
    return f"http://{endpoint}"


def resolve_config(
    config: ClientConfig | None = None,
    environ: Mapping[str, str] | None = None,
) -> ClientConfig:
    """Fill every unset field of *config* from :func:`default_config`.

    For each field the caller's value wins, then the environment, then the
    built-in default. *config* itself is never modified; a new frozen
    instance is returned.
    """
    given = config if config is not None else ClientConfig()
    defaults = default_config(environ)
    return ClientConfig(
        endpoint=normalize_endpoint(given.endpoint or defaults.endpoint),
        region=given.region,
        username=given.username or defaults.username,
        password=given.password or defaults.password,
        user_agent=given.user_agent or defaults.user_agent,
        http_client=(
            given.http_client
            if given.http_client is not None
            else defaults.http_client
        ),
    )


__all__ = [
    "DEFAULT_ENDPOINT",
    "DEFAULT_USER_AGENT",
    "ENV_ENDPOINT",
    "ENV_PASSWORD",
    "ENV_USERNAME",
    "ClientConfig",
    "default_config",
    "default_http_client",
    "normalize_endpoint",
    "resolve_config",
]
