"""Client for the Chaos Monkey REST API.

The client triggers chaos events, causing Chaos Monkey to "break" EC2
instances in different ways, and lists past events::

    client = ChaosMonkey(ClientConfig(endpoint="http://example.com:8080"))
    event = client.trigger_event("ExampleAutoScalingGroup",
                                 STRATEGY_SHUTDOWN_INSTANCE)
    events = client.events()

Chaos Monkey only accepts on-demand events when it is unleashed and
on-demand termination is enabled::

    simianarmy.chaos.leashed = false
    simianarmy.chaos.terminateOndemand.enabled = true
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from chaosmonkey.config import ClientConfig, resolve_config
from chaosmonkey.models import (
    EVENT_TYPE_CHAOS_TERMINATION,
    GROUP_TYPE_ASG,
    APIRequest,
    APIResponse,
    Event,
    Strategy,
    to_event,
)

logger = structlog.get_logger(__name__)

API_PATH = "/simianarmy/api/v1/chaos"

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_RESPONSE = TypeAdapter(APIResponse)
_RESPONSE_LIST = TypeAdapter(list[APIResponse] | None)

# ---------------------------------------------------------------------------
# Custom exceptions
# ---------------------------------------------------------------------------


class ChaosMonkeyError(RuntimeError):
    """Base class for every error raised by :class:`ChaosMonkey`."""


class NetworkError(ChaosMonkeyError):
    """The HTTP exchange could not be completed (refused, timeout, DNS)."""


class APIError(ChaosMonkeyError):
    """Chaos Monkey rejected the request and explained why.

    ``str(exc)`` is the server's message, verbatim.
    """

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class HTTPStatusError(ChaosMonkeyError):
    """Non-200 response without a usable error message."""

    def __init__(self, status: str, status_code: int) -> None:
        super().__init__(f"HTTP error: {status}")
        self.status = status
        self.status_code = status_code


class MalformedResponseError(ChaosMonkeyError, ValueError):
    """A 200 response whose body could not be decoded."""


# ---------------------------------------------------------------------------
# ChaosMonkey
# ---------------------------------------------------------------------------


class ChaosMonkey:
    """Client to the Chaos Monkey API.

    The configuration is resolved once, at construction, and never changes
    afterwards. Each call is a single, independent request, so one instance
    can be shared between threads.
    """

    def __init__(self, config: ClientConfig | None = None) -> None:
        self._config = resolve_config(config)

    @property
    def config(self) -> ClientConfig:
        """The resolved configuration."""
        return self._config

    @property
    def url(self) -> str:
        """URL of the chaos events resource."""
        return self._config.endpoint + API_PATH

    def trigger_event(self, group: str, strategy: Strategy) -> Event:
        """Trigger a chaos event against *group* using *strategy*.

        Chaos Monkey picks an instance of the auto scaling group and breaks
        it. The returned event identifies that instance.

        Raises:
            ChaosMonkeyError: if the request fails. It is not retried.
        """
        body = APIRequest(
            event_type=EVENT_TYPE_CHAOS_TERMINATION,
            group_type=GROUP_TYPE_ASG,
            group_name=group,
            chaos_type=strategy,
            region=self._config.region,
        )
        resp = self.send_request("POST", self.url, body.to_wire(), out=_RESPONSE)
        return to_event(resp)

    def events(self) -> list[Event]:
        """Return all chaos events."""
        return self.events_since(EPOCH)

    def events_since(self, since: datetime) -> list[Event]:
        """Return all chaos events triggered at or after *since*.

        Naive datetimes are taken to be UTC. Events are returned in the
        order the server sends them.
        """
        if since.tzinfo is None:
            since = since.replace(tzinfo=UTC)
        millis = math.floor(since.astimezone(UTC).timestamp()) * 1000
        url = f"{self.url}?since={millis}"
        resp = self.send_request("GET", url, out=_RESPONSE_LIST)
        return [to_event(r) for r in resp or []]

    def send_request(
        self,
        method: str,
        url: str,
        body: dict[str, Any] | None = None,
        out: TypeAdapter[Any] | None = None,
    ) -> Any:
        """Perform one HTTP exchange and return the decoded JSON body.

        Args:
            method: HTTP method.
            url:    Absolute URL.
            body:   Optional payload, sent as JSON.
            out:    Optional adapter the decoded body is validated with.

        Raises:
            NetworkError: if no response was received.
            APIError: on a non-200 status with an error message.
            HTTPStatusError: on any other non-200 status.
            MalformedResponseError: if a 200 body cannot be decoded.
        """
        config = self._config
        auth = None
        if config.username and config.password:
            auth = httpx.BasicAuth(config.username, config.password)

        logger.debug("sending_request", method=method, url=url)
        try:
            with config.http_client.stream(
                method,
                url,
                json=body,
                headers={"User-Agent": config.user_agent},
                auth=auth,
            ) as response:
                response.read()
                logger.debug(
                    "response_received",
                    method=method,
                    url=url,
                    status_code=response.status_code,
                )
                if response.status_code != httpx.codes.OK:
                    raise _decode_error(response)
                return _decode(response, out)
        except httpx.TransportError as exc:
            raise NetworkError(f"{method} {url} failed: {exc}") from exc


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _decode(response: httpx.Response, out: TypeAdapter[Any] | None) -> Any:
    try:
        data = response.json()
    except ValueError as exc:
        raise MalformedResponseError(f"invalid JSON in response: {exc}") from exc
    if out is None:
        return data
    try:
        return out.validate_python(data)
    except ValidationError as exc:
        raise MalformedResponseError(f"unexpected response shape: {exc}") from exc


def _decode_error(response: httpx.Response) -> ChaosMonkeyError:
    """Build the exception for a non-200 *response*."""
    try:
        resp = APIResponse.model_validate_json(response.content)
    except ValidationError:
        resp = None
    if resp is not None and resp.message:
        return APIError(resp.message, response.status_code)
    status = f"{response.status_code} {response.reason_phrase}"
    return HTTPStatusError(status, response.status_code)


__all__ = [
    "API_PATH",
    "EPOCH",
    "APIError",
    "ChaosMonkey",
    "ChaosMonkeyError",
    "HTTPStatusError",
    "MalformedResponseError",
    "NetworkError",
]
